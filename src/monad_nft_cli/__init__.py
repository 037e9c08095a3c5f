"""monad-nft-cli — inspect and transfer tokens of one ERC-721 collection.

Built on the web3.py async API with a strict layered architecture.
"""

from monad_nft_cli.version import __version__

__all__: list[str] = ["__version__"]
