"""Constants shared across layers.

Kept free of imports so that every layer (including the bootstrap
paths behind ``--help``) can read them without pulling in web3.
"""

from __future__ import annotations

from typing import Any

MAX_TOKEN_ID: int = 2**256 - 1
"""Largest value representable by the contract's ``uint256`` token ids."""

MENU_PAUSE_SECONDS: float = 1.0
"""Pause between an interactive action and the next menu."""

DEFAULT_ENV_FILE: str = ".env"

ENV_RPC_URL: str = "RPC_URL"
ENV_PRIVATE_KEY: str = "PRIVATE_KEY"
ENV_CONTRACT_ADDRESS: str = "NFT_CONTRACT_ADDRESS"

# Minimal ERC-721 surface used by the tool.  ``safeTransferFrom`` is
# declared with its 3-argument overload only, so the binding is
# unambiguous.
ERC721_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "name",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "symbol",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "ownerOf",
        "stateMutability": "view",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "type": "function",
        "name": "safeTransferFrom",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "from", "type": "address"},
            {"name": "to", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
        ],
        "outputs": [],
    },
]
