"""Domain models for monad-nft-cli.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and live only for the duration of one action (or,
for the session context, one process).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from monad_nft_cli.core.protocols import CollectionLedger


# ---------------------------------------------------------------------------
# Session-wide identities
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class WalletIdentity:
    """The single wallet this process acts for.

    Signing capability stays inside the ledger adapter; only the
    public address is exposed to the rest of the application.
    """

    address: str
    """Checksummed hex address (``0x`` + 40 hex digits)."""


@dataclass(frozen=True, slots=True)
class CollectionHandle:
    """The fixed ERC-721 contract every action targets."""

    address: str
    """Checksummed contract address."""


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Immutable context built once at startup and passed by reference.

    Replaces any module-level wallet/contract globals: the dispatcher,
    the action service and the interactive session all receive this
    value explicitly.
    """

    wallet: WalletIdentity
    collection: CollectionHandle
    ledger: CollectionLedger


# ---------------------------------------------------------------------------
# Validated action requests
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BalanceQuery:
    """Count the tokens held by *address* (the wallet itself when ``None``)."""

    address: str | None = None


@dataclass(frozen=True, slots=True)
class MetadataQuery:
    """Fetch the collection's display name and symbol."""


@dataclass(frozen=True, slots=True)
class TransferRequest:
    """Move *token_id* from the wallet to *to*."""

    to: str
    """Checksummed recipient address."""

    token_id: int
    """Non-negative token identifier within ``uint256`` range."""


ActionRequest = BalanceQuery | MetadataQuery | TransferRequest


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BalanceResult:
    owner: str
    balance: int
    collection_name: str


@dataclass(frozen=True, slots=True)
class CollectionInfo:
    name: str
    symbol: str
    contract_address: str


class ReceiptStatus(enum.Enum):
    """Finalization outcome of a mined transaction."""

    CONFIRMED = "confirmed"
    REVERTED = "reverted"


@dataclass(frozen=True, slots=True)
class PendingTransaction:
    """Handle for a broadcast, not-yet-finalized transaction."""

    tx_hash: str
    """``0x``-prefixed transaction hash."""


@dataclass(frozen=True, slots=True)
class TransactionReceipt:
    """Outcome of a transfer once the ledger has finalized it."""

    tx_hash: str
    status: ReceiptStatus
    block_number: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is ReceiptStatus.CONFIRMED
