"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so that the action service can be exercised against
a deterministic in-memory ledger without any network access.
"""

from __future__ import annotations

from typing import Protocol

from monad_nft_cli.core.models import PendingTransaction, TransactionReceipt


class CollectionLedger(Protocol):
    """Capability interface for one deployed ERC-721 contract.

    Bundles the node client, the signing wallet and the contract
    binding behind a single seam.  Any object that implements these
    coroutines with the correct signatures satisfies this protocol
    structurally (no explicit inheritance required).

    Implementations must map all backend-specific exceptions to
    :class:`~monad_nft_cli.exceptions.NftCliError` subclasses.
    """

    async def name(self) -> str:
        """Return the collection's display name.

        Raises
        ------
        RemoteQueryFailedError
            When the call fails or the node is unreachable.
        """
        ...  # pragma: no cover

    async def symbol(self) -> str:
        """Return the collection's ticker symbol.

        Raises
        ------
        RemoteQueryFailedError
            When the call fails or the node is unreachable.
        """
        ...  # pragma: no cover

    async def balance_of(self, owner: str) -> int:
        """Return how many tokens *owner* holds.

        Raises
        ------
        RemoteQueryFailedError
            When the call fails or the node is unreachable.
        """
        ...  # pragma: no cover

    async def owner_of(self, token_id: int) -> str:
        """Return the current owner of *token_id*.

        Raises
        ------
        RemoteQueryFailedError
            When the call fails, e.g. because the token does not exist.
        """
        ...  # pragma: no cover

    async def safe_transfer_from(
        self,
        sender: str,
        to: str,
        token_id: int,
    ) -> PendingTransaction:
        """Sign and broadcast a ``safeTransferFrom`` call.

        Returns as soon as the node accepts the transaction; the
        returned handle does not imply finality.

        Raises
        ------
        TransferSubmissionFailedError
            When the transaction is rejected before entering the
            pending pool (fee funds, nonce, pre-flight revert).
        """
        ...  # pragma: no cover

    async def wait_for_confirmation(
        self,
        pending: PendingTransaction,
    ) -> TransactionReceipt:
        """Suspend until *pending* is mined and return its receipt.

        A reverted transaction is returned as a receipt with
        :attr:`ReceiptStatus.REVERTED`; it is the caller's job to
        treat it as a failure.

        Raises
        ------
        TransferNotConfirmedError
            When no receipt can be obtained (timeout, dropped or
            replaced transaction).
        """
        ...  # pragma: no cover
