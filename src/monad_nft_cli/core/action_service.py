"""Core action service — the three collection operations.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~monad_nft_cli.core.models.SessionContext` whose
ledger satisfies :class:`~monad_nft_cli.core.protocols.CollectionLedger`
(dependency inversion), keeping the core free of any web3 imports.

Guarantees
----------
* Pure orchestration — no ``print()``, no filesystem access.
* Read-only queries fan out concurrently and fail as a whole.
* At most one transfer is in flight: :meth:`ActionService.transfer`
  returns only after the transaction is finalized.
* Only :class:`~monad_nft_cli.exceptions.NftCliError` subclasses escape.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from monad_nft_cli.core.models import (
    ActionRequest,
    BalanceQuery,
    BalanceResult,
    CollectionInfo,
    MetadataQuery,
    PendingTransaction,
    SessionContext,
    TransactionReceipt,
    TransferRequest,
)
from monad_nft_cli.exceptions import (
    NftCliError,
    RemoteQueryFailedError,
    TransferNotConfirmedError,
    TransferSubmissionFailedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ActionOutcome = BalanceResult | CollectionInfo | TransactionReceipt
SubmittedCallback = Callable[[PendingTransaction], None]


class ActionService:
    """Executes validated action requests against the session's ledger.

    Parameters
    ----------
    context:
        The immutable wallet/collection/ledger bundle built at startup.
    """

    def __init__(self, context: SessionContext) -> None:
        self._context: SessionContext = context

    @property
    def context(self) -> SessionContext:
        return self._context

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def execute(
        self,
        request: ActionRequest,
        *,
        on_submitted: SubmittedCallback | None = None,
    ) -> ActionOutcome:
        """Run whichever operation *request* describes."""
        if isinstance(request, BalanceQuery):
            return await self.query_balance(request)
        if isinstance(request, MetadataQuery):
            return await self.query_collection_info(request)
        if isinstance(request, TransferRequest):
            return await self.transfer(request, on_submitted=on_submitted)
        raise TypeError(f"Unsupported action request: {request!r}")

    async def query_balance(self, request: BalanceQuery) -> BalanceResult:
        """Fetch the token count for an address together with the collection name.

        Raises
        ------
        RemoteQueryFailedError
            If either of the two concurrent reads fails.
        """
        owner = request.address or self._context.wallet.address
        ledger = self._context.ledger
        logger.debug("Querying balance of %s", owner)

        balance, name = await asyncio.gather(
            self._read(ledger.balance_of(owner), "balanceOf"),
            self._read(ledger.name(), "name"),
        )
        return BalanceResult(owner=owner, balance=int(balance), collection_name=name)

    async def query_collection_info(
        self,
        request: MetadataQuery | None = None,
    ) -> CollectionInfo:
        """Fetch the collection's name and symbol concurrently.

        Raises
        ------
        RemoteQueryFailedError
            If either of the two concurrent reads fails.
        """
        ledger = self._context.ledger
        name, symbol = await asyncio.gather(
            self._read(ledger.name(), "name"),
            self._read(ledger.symbol(), "symbol"),
        )
        return CollectionInfo(
            name=name,
            symbol=symbol,
            contract_address=self._context.collection.address,
        )

    async def transfer(
        self,
        request: TransferRequest,
        *,
        on_submitted: SubmittedCallback | None = None,
    ) -> TransactionReceipt:
        """Transfer a token from the wallet and wait until it is finalized.

        Ownership and approval are not checked locally; the contract is
        authoritative.  There is no retry and no idempotency guard: a
        second identical request is a second, independent attempt.

        Parameters
        ----------
        request:
            Validated recipient and token id.
        on_submitted:
            Optional callable invoked with the pending handle as soon as
            the transaction has been broadcast, before confirmation.

        Raises
        ------
        TransferSubmissionFailedError
            When the transaction never entered the pending pool.
        TransferNotConfirmedError
            When the transaction was broadcast but did not succeed.
        """
        sender = self._context.wallet.address
        ledger = self._context.ledger
        logger.debug(
            "Submitting safeTransferFrom(%s, %s, %d)",
            sender,
            request.to,
            request.token_id,
        )

        try:
            pending = await ledger.safe_transfer_from(sender, request.to, request.token_id)
        except NftCliError:
            raise
        except Exception as exc:
            raise TransferSubmissionFailedError(
                f"Unexpected submission error: {exc}",
            ) from exc

        logger.info("Transaction %s broadcast", pending.tx_hash)
        if on_submitted is not None:
            on_submitted(pending)

        try:
            receipt = await ledger.wait_for_confirmation(pending)
        except asyncio.CancelledError:
            logger.warning(
                "Stopped waiting for %s; the transaction may still be mined.",
                pending.tx_hash,
            )
            raise
        except NftCliError:
            raise
        except Exception as exc:
            raise TransferNotConfirmedError(
                f"Unexpected error while waiting for confirmation: {exc}",
                tx_hash=pending.tx_hash,
            ) from exc

        if not receipt.succeeded:
            raise TransferNotConfirmedError(
                f"Transfer of token #{request.token_id} reverted on-chain.",
                tx_hash=receipt.tx_hash,
            )

        logger.info("Transaction %s confirmed in block %s", receipt.tx_hash, receipt.block_number)
        return receipt

    # ------------------------------------------------------------------
    # Ledger delegation (safe boundary)
    # ------------------------------------------------------------------

    @staticmethod
    async def _read(call: Awaitable[T], label: str) -> T:
        """Await a ledger read and ensure only our exceptions escape."""
        try:
            return await call
        except NftCliError:
            raise
        except Exception as exc:
            raise RemoteQueryFailedError(f"{label}() failed: {exc}") from exc
