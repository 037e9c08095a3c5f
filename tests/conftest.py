"""Shared pytest fixtures and configuration for the monad-nft-cli test suite.

Guidelines
----------
* No network access in any test.
* The ledger is replaced by :class:`FakeLedger` at the protocol seam;
  web3 is mocked at the infra boundary.
* Async code is driven with ``asyncio.run`` inside the test.
* Tests must not depend on OS state (no real ``.env`` is read).
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest

from monad_nft_cli.core.models import (
    CollectionHandle,
    PendingTransaction,
    ReceiptStatus,
    SessionContext,
    TransactionReceipt,
    WalletIdentity,
)
from monad_nft_cli.exceptions import TransferSubmissionFailedError

WALLET = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
RECIPIENT = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
OTHER = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
CONTRACT = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"


class FakeLedger:
    """Deterministic in-memory ERC-721 that tracks token owners.

    ``safeTransferFrom`` enforces the ownership check the real contract
    would, so a repeated transfer fails at submission.  Every call is
    appended to :attr:`calls` for assertions.
    """

    def __init__(
        self,
        owners: dict[int, str] | None = None,
        *,
        name: str = "Monad Lizards",
        symbol: str = "MLZ",
        revert_on_chain: bool = False,
    ) -> None:
        self.owners: dict[int, str] = dict(owners or {})
        self._name = name
        self._symbol = symbol
        self.revert_on_chain = revert_on_chain
        self.calls: list[tuple[object, ...]] = []
        self._tx_counter = 0

    async def name(self) -> str:
        self.calls.append(("name",))
        return self._name

    async def symbol(self) -> str:
        self.calls.append(("symbol",))
        return self._symbol

    async def balance_of(self, owner: str) -> int:
        self.calls.append(("balance_of", owner))
        return sum(1 for holder in self.owners.values() if holder == owner)

    async def owner_of(self, token_id: int) -> str:
        self.calls.append(("owner_of", token_id))
        return self.owners[token_id]

    async def safe_transfer_from(
        self,
        sender: str,
        to: str,
        token_id: int,
    ) -> PendingTransaction:
        self.calls.append(("safe_transfer_from", sender, to, token_id))
        if self.owners.get(token_id) != sender:
            raise TransferSubmissionFailedError(
                "Contract rejected the transfer: ERC721: caller is not token owner or approved",
            )
        self._tx_counter += 1
        tx_hash = "0x" + f"{self._tx_counter:064x}"
        if not self.revert_on_chain:
            self.owners[token_id] = to
        return PendingTransaction(tx_hash=tx_hash)

    async def wait_for_confirmation(
        self,
        pending: PendingTransaction,
    ) -> TransactionReceipt:
        self.calls.append(("wait_for_confirmation", pending.tx_hash))
        status = ReceiptStatus.REVERTED if self.revert_on_chain else ReceiptStatus.CONFIRMED
        return TransactionReceipt(tx_hash=pending.tx_hash, status=status, block_number=42)

    async def close(self) -> None:
        self.calls.append(("close",))


def make_context(ledger: object) -> SessionContext:
    return SessionContext(
        wallet=WalletIdentity(address=WALLET),
        collection=CollectionHandle(address=CONTRACT),
        ledger=ledger,  # type: ignore[arg-type]
    )


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger(owners={7: WALLET, 8: WALLET, 9: OTHER})


@pytest.fixture
def context(ledger: FakeLedger) -> SessionContext:
    return make_context(ledger)


@pytest.fixture
def fake_session(monkeypatch: pytest.MonkeyPatch, ledger: FakeLedger) -> FakeLedger:
    """Replace the app's session factory with one yielding :class:`FakeLedger`."""
    from monad_nft_cli.cli import app as app_module

    @contextlib.asynccontextmanager
    async def _open(env_file: Path | None) -> AsyncIterator[SessionContext]:
        yield make_context(ledger)

    monkeypatch.setattr(app_module, "open_session", _open)
    return ledger


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run every test in an empty directory with no wallet configuration."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("COLUMNS", "200")
    for key in ("RPC_URL", "PRIVATE_KEY", "NFT_CONTRACT_ADDRESS"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so caplog sees records in every test."""
    yield
    package_logger = logging.getLogger("monad_nft_cli")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
