"""Infrastructure layer — external system integration.

This layer wraps all interaction with the blockchain node (web3.py),
the signing key (eth-account) and the environment (python-dotenv).
Every raw third-party exception must be caught here and re-raised as
a :class:`~monad_nft_cli.exceptions.NftCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from monad_nft_cli.infra.settings import Settings, load_settings
from monad_nft_cli.infra.web3_ledger import Web3CollectionLedger

__all__: list[str] = [
    "Settings",
    "Web3CollectionLedger",
    "load_settings",
]
