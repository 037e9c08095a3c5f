"""Process-wide configuration loaded once at startup.

:class:`Settings` is a ``pydantic-settings`` model: values come from a
dotenv file overlaid by the real process environment, so an exported
variable always wins over the file.  Any missing or malformed value is
fatal: the caller receives a
:class:`~monad_nft_cli.exceptions.ConfigurationError` and the tool
never reaches the network.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from eth_utils import is_address, to_checksum_address
from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from monad_nft_cli.exceptions import ConfigurationError
from monad_nft_cli.utils.constants import (
    DEFAULT_ENV_FILE,
    ENV_CONTRACT_ADDRESS,
    ENV_PRIVATE_KEY,
    ENV_RPC_URL,
)

_PRIVATE_KEY_PATTERN = re.compile(r"(0x)?[0-9a-fA-F]{64}")
_NOT_SET = "is not set."

# Field name -> environment variable it is read from.
_ENV_NAMES: dict[str, str] = {
    "rpc_url": ENV_RPC_URL,
    "private_key": ENV_PRIVATE_KEY,
    "nft_contract_address": ENV_CONTRACT_ADDRESS,
}

_HINTS: dict[str, str] = {
    ENV_PRIVATE_KEY: "Expected 64 hex characters, optionally prefixed with 0x.",
    ENV_RPC_URL: "Example: RPC_URL=https://testnet-rpc.monad.xyz",
}


def _stripped(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError(_NOT_SET)
    return value


class Settings(BaseSettings):
    """Validated runtime configuration.

    Field names match the environment variables case-insensitively
    (``rpc_url`` is read from ``RPC_URL``).  ``private_key`` is a
    :class:`~pydantic.SecretStr` and never appears in ``repr``.
    """

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    rpc_url: str = Field(description="HTTP(S) JSON-RPC endpoint of the node.")
    private_key: SecretStr = Field(description="Hex signing key of the wallet.")
    nft_contract_address: str = Field(description="Address of the ERC-721 collection.")

    @field_validator("rpc_url", mode="before")
    @classmethod
    def _check_rpc_url(cls, value: Any) -> Any:
        value = _stripped(value)
        if isinstance(value, str) and not value.startswith(("http://", "https://")):
            raise ValueError(f"must be an http(s) URL, got {value!r}")
        return value

    @field_validator("private_key", mode="before")
    @classmethod
    def _check_private_key(cls, value: Any) -> Any:
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        value = _stripped(value)
        if isinstance(value, str) and not _PRIVATE_KEY_PATTERN.fullmatch(value):
            # Never echo the value back.
            raise ValueError("is malformed.")
        return value

    @field_validator("nft_contract_address", mode="before")
    @classmethod
    def _check_contract_address(cls, value: Any) -> Any:
        value = _stripped(value)
        if isinstance(value, str):
            if not is_address(value):
                raise ValueError(f"is not a valid address: {value!r}")
            return to_checksum_address(value)
        return value

    @property
    def contract_address(self) -> str:
        return self.nft_contract_address


def load_settings(env_file: Path | str | None = None) -> Settings:
    """Read and validate ``RPC_URL``, ``PRIVATE_KEY`` and ``NFT_CONTRACT_ADDRESS``.

    Parameters
    ----------
    env_file:
        Explicit dotenv file.  When ``None``, ``.env`` in the current
        working directory is used if it exists.

    Raises
    ------
    ConfigurationError
        If a key is missing or fails validation, or if an explicitly
        requested *env_file* does not exist.
    """
    try:
        if env_file is None:
            return Settings()
        path = Path(env_file).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Env file not found: {path}")
        return Settings(_env_file=path)
    except ValidationError as exc:
        raise _to_configuration_error(exc) from None


def _to_configuration_error(exc: ValidationError) -> ConfigurationError:
    """Translate the first pydantic error without its input value."""
    error = exc.errors(include_input=False)[0]
    field_name = str(error["loc"][0]) if error["loc"] else ""
    key = _ENV_NAMES.get(field_name, field_name)
    reason = error["msg"].removeprefix("Value error, ")

    if error["type"] == "missing" or reason == _NOT_SET:
        return ConfigurationError(
            f"{key} {_NOT_SET}",
            hint=f"Export {key} or add it to your {DEFAULT_ENV_FILE} file.",
        )
    return ConfigurationError(f"{key} {reason}", hint=_HINTS.get(key))
