"""Run a single validated action and render its outcome.

Shared by command mode and the interactive session so both print the
same status lines.  Presentation helpers are pure string transforms;
:func:`run_action` is the only function here that awaits the network.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from monad_nft_cli.cli.console import console
from monad_nft_cli.core.action_service import ActionService
from monad_nft_cli.core.models import (
    ActionRequest,
    BalanceQuery,
    BalanceResult,
    CollectionInfo,
    MetadataQuery,
    PendingTransaction,
    TransactionReceipt,
    TransferRequest,
)


# ---------------------------------------------------------------------------
# Presentation helpers (pure, no I/O)
# ---------------------------------------------------------------------------

def _escape(text: str) -> str:
    """Escape opening brackets so remote strings are never read as markup."""
    return text.replace("[", r"\[")


def _pluralize_nft(count: int) -> str:
    return "1 NFT" if count == 1 else f"{count} NFTs"


def describe_balance(result: BalanceResult) -> str:
    """Render ``"0xAb… owns 3 NFTs in "Name" collection"``."""
    return (
        f"[bold]{result.owner}[/bold] owns [cyan]{_pluralize_nft(result.balance)}[/cyan] "
        f'in "{_escape(result.collection_name)}" collection'
    )


def describe_collection(info: CollectionInfo) -> list[str]:
    return [
        "[bold]Collection Info:[/bold]",
        f"Name: {_escape(info.name)}",
        f"Symbol: {_escape(info.symbol)}",
        f"Contract: {info.contract_address}",
    ]


def describe_receipt(receipt: TransactionReceipt) -> str:
    line = f"[bold green]Success![/bold green] Transaction hash: {receipt.tx_hash}"
    if receipt.block_number is not None:
        line += f" (block {receipt.block_number})"
    return line


def _announcer(out: Any) -> Callable[[PendingTransaction], None]:
    """Return a callback printing the broadcast hash through *out*."""

    def _announce(pending: PendingTransaction) -> None:
        out.print(f"Transaction submitted: {pending.tx_hash}")

    return _announce


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

async def run_action(service: ActionService, request: ActionRequest) -> None:
    """Execute *request* through *service* and print its outcome.

    Errors are not caught here; the caller decides whether an error
    ends the process (command mode) or returns to the menu.
    """
    if isinstance(request, BalanceQuery):
        result = await service.query_balance(request)
        console.print()
        console.print(describe_balance(result))
    elif isinstance(request, MetadataQuery):
        info = await service.query_collection_info(request)
        console.print()
        for line in describe_collection(info):
            console.print(line)
    elif isinstance(request, TransferRequest):
        console.print()
        console.print(
            f"Attempting to transfer NFT #{request.token_id} to {request.to}..."
        )
        with console.status("Waiting for confirmation...") as status_console:
            receipt = await service.transfer(
                request, on_submitted=_announcer(status_console),
            )
        console.print(describe_receipt(receipt))
    else:
        raise TypeError(f"Unsupported action request: {request!r}")
