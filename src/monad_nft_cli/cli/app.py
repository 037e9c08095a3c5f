"""CLI application entry point and action dispatch for monad-nft-cli.

This module is the **process-level error boundary** for the entire
application.  It catches :class:`~monad_nft_cli.exceptions.NftCliError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* With ``--action`` the tool runs in command mode: one action, then exit.
  Without it, the interactive session takes over.
* Command-line values are validated before configuration is read, so a
  usage error never touches the network.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from collections.abc import AsyncIterator
from pathlib import Path
from typing import TYPE_CHECKING

from monad_nft_cli.cli import exit_codes
from monad_nft_cli.cli.console import err_console, render_error
from monad_nft_cli.cli.logging_setup import configure_logging
from monad_nft_cli.exceptions import NftCliError
from monad_nft_cli.version import __version__

if TYPE_CHECKING:
    from monad_nft_cli.core.models import ActionRequest, SessionContext

logger = logging.getLogger(__name__)

ACTIONS: tuple[str, ...] = ("balance", "transfer", "info")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``monad-nft``                                       — interactive menu
    * ``monad-nft -a balance [--address ADDR]``
    * ``monad-nft -a transfer --to ADDR --tokenId N``
    * ``monad-nft -a info``
    """
    parser = argparse.ArgumentParser(
        prog="monad-nft",
        description="Check balances and transfer NFTs of a single ERC-721 collection.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-a",
        "--action",
        choices=ACTIONS,
        default=None,
        help="Action to perform. Omit to start the interactive menu.",
    )
    parser.add_argument(
        "--address",
        default=None,
        help="Wallet address to check (defaults to your own wallet).",
    )
    parser.add_argument(
        "--to",
        default=None,
        help="Recipient address for transfers.",
    )
    parser.add_argument(
        "--tokenId",
        "--token-id",
        dest="token_id",
        default=None,
        help="NFT ID to transfer.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="dotenv file with RPC_URL, PRIVATE_KEY and NFT_CONTRACT_ADDRESS (default: ./.env).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


# ---------------------------------------------------------------------------
# Session wiring
# ---------------------------------------------------------------------------

@contextlib.asynccontextmanager
async def open_session(env_file: Path | None) -> AsyncIterator[SessionContext]:
    """Load configuration, connect the ledger and yield the session context.

    The ledger is created inside the running event loop and closed when
    the session ends.
    """
    from monad_nft_cli.core.models import CollectionHandle, SessionContext, WalletIdentity
    from monad_nft_cli.infra.settings import load_settings
    from monad_nft_cli.infra.web3_ledger import Web3CollectionLedger

    settings = load_settings(env_file)
    ledger = Web3CollectionLedger(settings)
    context = SessionContext(
        wallet=WalletIdentity(address=ledger.account_address),
        collection=CollectionHandle(address=settings.contract_address),
        ledger=ledger,
    )
    logger.debug("Session opened for wallet %s", context.wallet.address)
    try:
        yield context
    finally:
        await ledger.close()


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _build_command_request(args: argparse.Namespace) -> ActionRequest:
    """Validate the flags for ``--action`` into an action request.

    Raises
    ------
    MissingRequiredFlagError
        When ``transfer`` lacks ``--to`` or ``--tokenId``.
    InvalidAddressError, InvalidTokenIdError
        When a supplied value is malformed.
    """
    from monad_nft_cli.core.validation import (
        build_balance_query,
        build_metadata_query,
        build_transfer_request,
    )

    if args.action == "balance":
        return build_balance_query(args.address)
    if args.action == "transfer":
        return build_transfer_request(args.to, args.token_id)
    return build_metadata_query()


async def _handle_command(request: ActionRequest, env_file: Path | None) -> int:
    """Run exactly one action and return once it resolves."""
    from monad_nft_cli.cli.actions import run_action
    from monad_nft_cli.core.action_service import ActionService

    async with open_session(env_file) as context:
        await run_action(ActionService(context), request)
    return exit_codes.SUCCESS


async def _handle_interactive(env_file: Path | None) -> int:
    """Enter the menu loop; returns when the user chooses Exit."""
    from monad_nft_cli.cli.session import load_questionary, run_session
    from monad_nft_cli.core.action_service import ActionService

    # Fail on a missing UI library before reading secrets or connecting.
    load_questionary()
    async with open_session(env_file) as context:
        return await run_session(ActionService(context))


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the monad-nft CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.action is None:
        return asyncio.run(_handle_interactive(args.env_file))

    request = _build_command_request(args)
    return asyncio.run(_handle_command(request, args.env_file))


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except NftCliError as exc:
        render_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        err_console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
