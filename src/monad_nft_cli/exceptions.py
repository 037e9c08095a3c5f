"""Custom exception hierarchy for monad-nft-cli.

All exceptions that cross layer boundaries must inherit from
:class:`NftCliError`.  Raw third-party exceptions (e.g. from web3.py)
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
NftCliError
├── ValidationError
│   ├── InvalidAddressError
│   ├── InvalidTokenIdError
│   └── MissingRequiredFlagError
├── ConfigurationError
├── MissingDependencyError
├── PromptCancelledError
├── RemoteQueryFailedError
├── TransferSubmissionFailedError
└── TransferNotConfirmedError
"""

from __future__ import annotations


class NftCliError(Exception):
    """Base exception for all monad-nft-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Local validation ------------------------------------------------------

class ValidationError(NftCliError):
    """Raised when user input is rejected before any network access."""


class InvalidAddressError(ValidationError):
    """Raised when an address fails the chain's address-format rules."""

    def __init__(
        self,
        message: str,
        *,
        field: str,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.field: str = field
        """Name of the offending input (e.g. ``"to"``)."""


class InvalidTokenIdError(ValidationError):
    """Raised when a token identifier is not a non-negative integer."""


class MissingRequiredFlagError(ValidationError):
    """Raised when a command-line action lacks one of its required flags."""


# --- Startup / environment -------------------------------------------------

class ConfigurationError(NftCliError):
    """Raised when process-wide configuration is absent or malformed."""


class MissingDependencyError(NftCliError):
    """Raised when an optional runtime library is not installed."""


class PromptCancelledError(NftCliError):
    """Raised when the user dismisses an interactive prompt."""


# --- Remote ledger ---------------------------------------------------------

class RemoteQueryFailedError(NftCliError):
    """Raised when a read-only contract call fails or the node is unreachable."""


class TransferSubmissionFailedError(NftCliError):
    """Raised when a transfer is rejected before entering the pending pool."""


class TransferNotConfirmedError(NftCliError):
    """Raised when a broadcast transfer does not finalize successfully.

    Unlike :class:`TransferSubmissionFailedError`, the transaction has
    left this process: network fees may already be spent.
    """

    def __init__(
        self,
        message: str,
        *,
        tx_hash: str,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint or broadcast_hint(tx_hash))
        self.tx_hash: str = tx_hash


def broadcast_hint(tx_hash: str) -> str:
    """Return guidance for a transaction that left the process unconfirmed."""
    return "\n".join(
        (
            f"Transaction {tx_hash} was broadcast; network fees may already be spent.",
            "Check it on a block explorer before retrying the transfer.",
        )
    )
