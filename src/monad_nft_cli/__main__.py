"""Allow ``python -m monad_nft_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m monad_nft_cli`` behaves identically to the
``monad-nft`` console script.
"""

from __future__ import annotations

from monad_nft_cli.cli.app import cli

if __name__ == "__main__":
    cli()
