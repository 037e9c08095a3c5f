"""Tests for ActionService (core/action_service.py).

The :class:`CollectionLedger` dependency is the in-memory
:class:`FakeLedger` or a ``MagicMock`` with ``AsyncMock`` methods — no
network access, no web3 invocation.  These tests verify:

* Balance / metadata reads fan out concurrently and fail as a whole
* Balance defaults to the wallet's own address
* Transfers wait for confirmation and are not idempotent
* Reverted transfers surface as ``TransferNotConfirmedError``
* Unexpected ledger errors are wrapped in our hierarchy
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import CONTRACT, OTHER, RECIPIENT, WALLET, FakeLedger, make_context
from monad_nft_cli.core.action_service import ActionService
from monad_nft_cli.core.models import (
    BalanceQuery,
    BalanceResult,
    CollectionInfo,
    MetadataQuery,
    PendingTransaction,
    ReceiptStatus,
    TransactionReceipt,
    TransferRequest,
)
from monad_nft_cli.exceptions import (
    RemoteQueryFailedError,
    TransferNotConfirmedError,
    TransferSubmissionFailedError,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _GatedLedger(FakeLedger):
    """Ledger whose two reads only complete if both are in flight together."""

    def __init__(self) -> None:
        super().__init__(owners={1: WALLET})
        self._entered = 0
        self._both_in_flight = asyncio.Event()

    async def _rendezvous(self) -> None:
        self._entered += 1
        if self._entered == 2:
            self._both_in_flight.set()
        await asyncio.wait_for(self._both_in_flight.wait(), timeout=1.0)

    async def name(self) -> str:
        await self._rendezvous()
        return await super().name()

    async def symbol(self) -> str:
        await self._rendezvous()
        return await super().symbol()

    async def balance_of(self, owner: str) -> int:
        await self._rendezvous()
        return await super().balance_of(owner)


def _mock_ledger() -> MagicMock:
    ledger = MagicMock()
    ledger.name = AsyncMock(return_value="Monad Lizards")
    ledger.symbol = AsyncMock(return_value="MLZ")
    ledger.balance_of = AsyncMock(return_value=3)
    ledger.safe_transfer_from = AsyncMock(return_value=PendingTransaction(tx_hash="0xabc"))
    ledger.wait_for_confirmation = AsyncMock(
        return_value=TransactionReceipt(
            tx_hash="0xabc", status=ReceiptStatus.CONFIRMED, block_number=1,
        ),
    )
    return ledger


# ---------------------------------------------------------------------------
# Balance query
# ---------------------------------------------------------------------------

class TestQueryBalance:
    def test_defaults_to_wallet_address(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        result = asyncio.run(svc.query_balance(BalanceQuery()))
        assert result == BalanceResult(owner=WALLET, balance=2, collection_name="Monad Lizards")
        assert ("balance_of", WALLET) in ledger.calls

    def test_explicit_address(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        result = asyncio.run(svc.query_balance(BalanceQuery(address=OTHER)))
        assert result.owner == OTHER
        assert result.balance == 1

    def test_reads_are_concurrent(self) -> None:
        ledger = _GatedLedger()
        svc = ActionService(make_context(ledger))
        result = asyncio.run(svc.query_balance(BalanceQuery()))
        assert result.balance == 1
        assert result.collection_name == "Monad Lizards"

    def test_repeat_is_read_only(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        before = dict(ledger.owners)
        first = asyncio.run(svc.query_balance(BalanceQuery()))
        second = asyncio.run(svc.query_balance(BalanceQuery()))
        assert first == second
        assert ledger.owners == before

    def test_either_failure_fails_whole_query(self) -> None:
        ledger = _mock_ledger()
        ledger.name.side_effect = RemoteQueryFailedError("name() failed: node down")
        svc = ActionService(make_context(ledger))
        with pytest.raises(RemoteQueryFailedError, match="node down"):
            asyncio.run(svc.query_balance(BalanceQuery()))

    def test_unexpected_error_wrapped(self) -> None:
        ledger = _mock_ledger()
        ledger.balance_of.side_effect = ConnectionError("refused")
        svc = ActionService(make_context(ledger))
        with pytest.raises(RemoteQueryFailedError, match="balanceOf"):
            asyncio.run(svc.query_balance(BalanceQuery()))


# ---------------------------------------------------------------------------
# Metadata query
# ---------------------------------------------------------------------------

class TestQueryCollectionInfo:
    def test_returns_name_symbol_and_contract(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        info = asyncio.run(svc.query_collection_info(MetadataQuery()))
        assert info == CollectionInfo(name="Monad Lizards", symbol="MLZ", contract_address=CONTRACT)

    def test_reads_are_concurrent(self) -> None:
        svc = ActionService(make_context(_GatedLedger()))
        info = asyncio.run(svc.query_collection_info())
        assert info.symbol == "MLZ"

    def test_symbol_failure(self) -> None:
        ledger = _mock_ledger()
        ledger.symbol.side_effect = RuntimeError("boom")
        svc = ActionService(make_context(ledger))
        with pytest.raises(RemoteQueryFailedError, match="symbol"):
            asyncio.run(svc.query_collection_info())

    def test_does_not_mutate(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        before = dict(ledger.owners)
        asyncio.run(svc.query_collection_info())
        assert ledger.owners == before
        assert not any(call[0] == "safe_transfer_from" for call in ledger.calls)


# ---------------------------------------------------------------------------
# Transfer
# ---------------------------------------------------------------------------

class TestTransfer:
    def test_success_returns_receipt(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        receipt = asyncio.run(svc.transfer(TransferRequest(to=RECIPIENT, token_id=7)))
        assert receipt.succeeded
        assert ledger.owners[7] == RECIPIENT

    def test_submits_from_wallet_then_waits(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        asyncio.run(svc.transfer(TransferRequest(to=RECIPIENT, token_id=7)))
        names = [call[0] for call in ledger.calls]
        assert names == ["safe_transfer_from", "wait_for_confirmation"]
        assert ledger.calls[0] == ("safe_transfer_from", WALLET, RECIPIENT, 7)

    def test_not_idempotent(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        request = TransferRequest(to=RECIPIENT, token_id=7)
        asyncio.run(svc.transfer(request))
        with pytest.raises(TransferSubmissionFailedError, match="not token owner"):
            asyncio.run(svc.transfer(request))
        submissions = [call for call in ledger.calls if call[0] == "safe_transfer_from"]
        assert len(submissions) == 2

    def test_not_owner_fails_at_submission(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        with pytest.raises(TransferSubmissionFailedError):
            asyncio.run(svc.transfer(TransferRequest(to=RECIPIENT, token_id=9)))
        assert not any(call[0] == "wait_for_confirmation" for call in ledger.calls)

    def test_reverted_receipt_is_not_confirmed(self) -> None:
        ledger = FakeLedger(owners={7: WALLET}, revert_on_chain=True)
        svc = ActionService(make_context(ledger))
        with pytest.raises(TransferNotConfirmedError, match="reverted") as exc_info:
            asyncio.run(svc.transfer(TransferRequest(to=RECIPIENT, token_id=7)))
        assert exc_info.value.tx_hash.startswith("0x")
        assert "fees may already be spent" in (exc_info.value.hint or "")

    def test_on_submitted_called_before_wait(self) -> None:
        ledger = _mock_ledger()
        seen: list[str] = []

        def _on_submitted(pending: PendingTransaction) -> None:
            seen.append(pending.tx_hash)
            ledger.wait_for_confirmation.assert_not_called()

        svc = ActionService(make_context(ledger))
        asyncio.run(
            svc.transfer(TransferRequest(to=RECIPIENT, token_id=1), on_submitted=_on_submitted),
        )
        assert seen == ["0xabc"]

    def test_unexpected_submission_error_wrapped(self) -> None:
        ledger = _mock_ledger()
        ledger.safe_transfer_from.side_effect = ValueError("nonce too low")
        svc = ActionService(make_context(ledger))
        with pytest.raises(TransferSubmissionFailedError, match="nonce too low"):
            asyncio.run(svc.transfer(TransferRequest(to=RECIPIENT, token_id=1)))
        ledger.wait_for_confirmation.assert_not_called()

    def test_unexpected_wait_error_wrapped(self) -> None:
        ledger = _mock_ledger()
        ledger.wait_for_confirmation.side_effect = RuntimeError("dropped")
        svc = ActionService(make_context(ledger))
        with pytest.raises(TransferNotConfirmedError) as exc_info:
            asyncio.run(svc.transfer(TransferRequest(to=RECIPIENT, token_id=1)))
        assert exc_info.value.tx_hash == "0xabc"

    def test_cancelled_wait_is_logged_and_reraised(
        self, caplog: pytest.LogCaptureFixture,
    ) -> None:
        ledger = _mock_ledger()
        ledger.wait_for_confirmation.side_effect = asyncio.CancelledError()
        svc = ActionService(make_context(ledger))
        with caplog.at_level("WARNING", logger="monad_nft_cli"):
            with pytest.raises(asyncio.CancelledError):
                asyncio.run(svc.transfer(TransferRequest(to=RECIPIENT, token_id=1)))
        assert "0xabc" in caplog.text


# ---------------------------------------------------------------------------
# execute() dispatch
# ---------------------------------------------------------------------------

class TestExecute:
    def test_dispatches_each_request_type(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        assert isinstance(asyncio.run(svc.execute(BalanceQuery())), BalanceResult)
        assert isinstance(asyncio.run(svc.execute(MetadataQuery())), CollectionInfo)
        receipt = asyncio.run(svc.execute(TransferRequest(to=RECIPIENT, token_id=8)))
        assert isinstance(receipt, TransactionReceipt)

    def test_rejects_unknown_request(self, ledger: FakeLedger) -> None:
        svc = ActionService(make_context(ledger))
        with pytest.raises(TypeError):
            asyncio.run(svc.execute("balance"))  # type: ignore[arg-type]
