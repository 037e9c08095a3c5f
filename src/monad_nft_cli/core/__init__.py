"""Core / service layer — validation, domain models and action logic.

Rules
-----
* No ``print()`` calls.
* No network I/O except through the injected ledger protocol.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed.
"""

from monad_nft_cli.core.action_service import ActionService
from monad_nft_cli.core.models import (
    ActionRequest,
    BalanceQuery,
    BalanceResult,
    CollectionHandle,
    CollectionInfo,
    MetadataQuery,
    PendingTransaction,
    ReceiptStatus,
    SessionContext,
    TransactionReceipt,
    TransferRequest,
    WalletIdentity,
)
from monad_nft_cli.core.protocols import CollectionLedger

__all__: list[str] = [
    "ActionRequest",
    "ActionService",
    "BalanceQuery",
    "BalanceResult",
    "CollectionHandle",
    "CollectionInfo",
    "CollectionLedger",
    "MetadataQuery",
    "PendingTransaction",
    "ReceiptStatus",
    "SessionContext",
    "TransactionReceipt",
    "TransferRequest",
    "WalletIdentity",
]
