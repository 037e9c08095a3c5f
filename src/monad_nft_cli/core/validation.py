"""Local validation of raw user input into action requests.

Everything here is synchronous and purely local — no network calls
are made, so a request that fails validation never reaches the
ledger.  Both the command-line dispatcher and the interactive session
build their requests through these functions.
"""

from __future__ import annotations

import re

from eth_utils import is_address, to_checksum_address

from monad_nft_cli.core.models import BalanceQuery, MetadataQuery, TransferRequest
from monad_nft_cli.exceptions import (
    InvalidAddressError,
    InvalidTokenIdError,
    MissingRequiredFlagError,
)
from monad_nft_cli.utils.constants import MAX_TOKEN_ID

_DECIMAL_PATTERN = re.compile(r"[0-9]+")
_MAX_TOKEN_ID_DIGITS = len(str(MAX_TOKEN_ID))


def validate_address(raw: str, *, field: str = "address") -> str:
    """Return the checksummed form of *raw* or raise :class:`InvalidAddressError`.

    Accepts all-lowercase / all-uppercase hex, or mixed case with a
    valid EIP-55 checksum.
    """
    candidate = raw.strip()
    if not candidate:
        raise InvalidAddressError(f"{field}: address must not be empty.", field=field)
    if not is_address(candidate):
        raise InvalidAddressError(
            f"{field}: invalid address {candidate!r}",
            field=field,
            hint="Expected 0x followed by 40 hex digits with a valid checksum.",
        )
    return to_checksum_address(candidate)


def validate_token_id(raw: str | int) -> int:
    """Parse a base-10 non-negative token id within ``uint256`` range."""
    if isinstance(raw, bool):
        raise InvalidTokenIdError(f"Invalid token id: {raw!r}")
    if isinstance(raw, int):
        value = raw
    else:
        candidate = raw.strip()
        if not _DECIMAL_PATTERN.fullmatch(candidate):
            raise InvalidTokenIdError(
                f"Invalid token id: {candidate!r}",
                hint="Token ids are whole numbers written with digits 0-9.",
            )
        significant = candidate.lstrip("0")
        # Bounded before int(): huge digit strings exceed the int conversion limit.
        if len(significant) > _MAX_TOKEN_ID_DIGITS:
            raise InvalidTokenIdError(f"Token id out of range: {len(significant)}-digit value")
        value = int(significant or "0", 10)

    if value < 0 or value > MAX_TOKEN_ID:
        raise InvalidTokenIdError(f"Token id out of range: {value}")
    return value


# ---------------------------------------------------------------------------
# Request builders
# ---------------------------------------------------------------------------

def build_balance_query(raw_address: str | None) -> BalanceQuery:
    """Build a :class:`BalanceQuery`; blank input targets the wallet itself."""
    if raw_address is None or not raw_address.strip():
        return BalanceQuery()
    return BalanceQuery(address=validate_address(raw_address, field="address"))


def build_metadata_query() -> MetadataQuery:
    return MetadataQuery()


def build_transfer_request(
    raw_to: str | None,
    raw_token_id: str | int | None,
) -> TransferRequest:
    """Build a :class:`TransferRequest` from the ``--to`` / ``--tokenId`` values.

    Raises
    ------
    MissingRequiredFlagError
        If either value is absent.
    InvalidAddressError
        If *raw_to* is not a well-formed address.
    InvalidTokenIdError
        If *raw_token_id* is not a non-negative integer.
    """
    to_missing = raw_to is None or not raw_to.strip()
    token_missing = raw_token_id is None or (
        isinstance(raw_token_id, str) and not raw_token_id.strip()
    )
    if raw_to is None or raw_token_id is None or to_missing or token_missing:
        missing = [
            flag
            for flag, absent in (("--to", to_missing), ("--tokenId", token_missing))
            if absent
        ]
        raise MissingRequiredFlagError(
            f"{' and '.join(missing)} required for transfers",
            hint="Example: --action transfer --to 0x... --tokenId 7",
        )

    return TransferRequest(
        to=validate_address(raw_to, field="to"),
        token_id=validate_token_id(raw_token_id),
    )
