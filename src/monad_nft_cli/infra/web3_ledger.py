"""web3.py backed implementation of :class:`~monad_nft_cli.core.protocols.CollectionLedger`.

This module is the **only** place in the codebase that imports ``web3``
and ``eth_account``.  All web3 / transport exceptions are caught here
and re-raised as typed :class:`~monad_nft_cli.exceptions.NftCliError`
subclasses — nothing raw escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
from typing import Any

from monad_nft_cli.core.models import PendingTransaction, ReceiptStatus, TransactionReceipt
from monad_nft_cli.exceptions import (
    ConfigurationError,
    MissingDependencyError,
    RemoteQueryFailedError,
    TransferNotConfirmedError,
    TransferSubmissionFailedError,
)
from monad_nft_cli.infra.settings import Settings
from monad_nft_cli.utils.constants import ERC721_ABI

logger = logging.getLogger(__name__)


class Web3CollectionLedger:
    """Concrete :class:`CollectionLedger` backed by ``AsyncWeb3``.

    Usage::

        ledger = Web3CollectionLedger(load_settings())
        name = await ledger.name()
        await ledger.close()

    The signing key is held here and nowhere else; transactions are
    signed locally and submitted with ``eth_sendRawTransaction``.
    """

    def __init__(self, settings: Settings) -> None:
        try:
            from eth_account import Account
            from web3 import AsyncHTTPProvider, AsyncWeb3
        except ModuleNotFoundError as exc:
            raise MissingDependencyError(
                "web3 is not installed. Install with: pip install web3",
            ) from exc

        try:
            self._account: Any = Account.from_key(settings.private_key.get_secret_value())
        except Exception as exc:
            raise ConfigurationError("PRIVATE_KEY is not a usable signing key.") from exc

        self._w3: Any = AsyncWeb3(AsyncHTTPProvider(settings.rpc_url))
        self._contract: Any = self._w3.eth.contract(
            address=settings.contract_address,
            abi=ERC721_ABI,
        )
        logger.debug(
            "Bound ERC-721 contract %s via %s",
            settings.contract_address,
            settings.rpc_url,
        )

    @property
    def account_address(self) -> str:
        """Checksummed address derived from the configured private key."""
        return str(self._account.address)

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    async def name(self) -> str:
        return str(await self._call("name"))

    async def symbol(self) -> str:
        return str(await self._call("symbol"))

    async def balance_of(self, owner: str) -> int:
        return int(await self._call("balanceOf", owner))

    async def owner_of(self, token_id: int) -> str:
        return str(await self._call("ownerOf", token_id))

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    async def safe_transfer_from(
        self,
        sender: str,
        to: str,
        token_id: int,
    ) -> PendingTransaction:
        """Build, sign and broadcast ``safeTransferFrom(sender, to, token_id)``.

        Gas and fee fields are filled in by web3 (``build_transaction``
        estimates gas, which also surfaces contract reverts before the
        transaction is sent).

        Raises
        ------
        TransferSubmissionFailedError
            For any failure up to and including ``send_raw_transaction``.
        """
        from web3 import Web3
        from web3.exceptions import ContractLogicError

        function = self._contract.functions.safeTransferFrom(sender, to, token_id)
        try:
            nonce = await self._w3.eth.get_transaction_count(sender, "pending")
            tx = await function.build_transaction({"from": sender, "nonce": nonce})
            signed = self._account.sign_transaction(tx)
            raw_tx = getattr(signed, "raw_transaction", None) or getattr(
                signed, "rawTransaction", None
            )
            if raw_tx is None:
                raise TransferSubmissionFailedError(
                    "Signed transaction is missing its raw payload.",
                )
            tx_hash = await self._w3.eth.send_raw_transaction(raw_tx)
        except TransferSubmissionFailedError:
            raise
        except ContractLogicError as exc:
            raise TransferSubmissionFailedError(
                f"Contract rejected the transfer: {exc}",
                hint=f"Check that this wallet owns token #{token_id} or is approved for it.",
            ) from exc
        except Exception as exc:
            raise TransferSubmissionFailedError(
                f"Transfer submission failed: {exc}",
                hint="Check the wallet's balance for network fees and the RPC endpoint.",
            ) from exc

        return PendingTransaction(tx_hash=Web3.to_hex(tx_hash))

    async def wait_for_confirmation(
        self,
        pending: PendingTransaction,
    ) -> TransactionReceipt:
        """Suspend until the node reports a receipt for *pending*.

        No timeout of our own is applied: the web3 client default for
        ``wait_for_transaction_receipt`` governs.

        Raises
        ------
        TransferNotConfirmedError
            When the wait times out or the receipt cannot be fetched.
        """
        from web3.exceptions import TimeExhausted

        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(pending.tx_hash)
        except TimeExhausted as exc:
            raise TransferNotConfirmedError(
                f"Transaction {pending.tx_hash} was not confirmed within the client timeout.",
                tx_hash=pending.tx_hash,
            ) from exc
        except Exception as exc:
            raise TransferNotConfirmedError(
                f"Could not obtain a receipt for {pending.tx_hash}: {exc}",
                tx_hash=pending.tx_hash,
            ) from exc

        status = (
            ReceiptStatus.CONFIRMED if receipt.get("status") == 1 else ReceiptStatus.REVERTED
        )
        return TransactionReceipt(
            tx_hash=pending.tx_hash,
            status=status,
            block_number=receipt.get("blockNumber"),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Release the provider's HTTP session, when the provider has one."""
        disconnect = getattr(self._w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    async def _call(self, function_name: str, *args: Any) -> Any:
        """Invoke a view function and translate any failure."""
        from web3.exceptions import ContractLogicError

        try:
            return await getattr(self._contract.functions, function_name)(*args).call()
        except ContractLogicError as exc:
            raise RemoteQueryFailedError(
                f"{function_name}() reverted: {exc}",
            ) from exc
        except Exception as exc:
            raise RemoteQueryFailedError(
                f"{function_name}() failed: {exc}",
                hint="Check RPC_URL and that the node is reachable.",
            ) from exc
