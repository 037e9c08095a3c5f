"""Interactive menu loop for the CLI layer.

This module is responsible for:

* Presenting the action menu via questionary arrow keys.
* Prompting for action fields, re-prompting until they validate.
* Running the chosen action and rendering its outcome or error.

Each iteration is independent: the only state carried between rounds
is the immutable :class:`~monad_nft_cli.core.models.SessionContext`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from monad_nft_cli.cli import exit_codes
from monad_nft_cli.cli.actions import run_action
from monad_nft_cli.cli.console import console, render_error
from monad_nft_cli.core.action_service import ActionService
from monad_nft_cli.core.models import ActionRequest, MetadataQuery, TransferRequest
from monad_nft_cli.core.validation import (
    build_balance_query,
    validate_address,
    validate_token_id,
)
from monad_nft_cli.exceptions import (
    MissingDependencyError,
    NftCliError,
    PromptCancelledError,
    ValidationError,
)
from monad_nft_cli.utils.constants import MENU_PAUSE_SECONDS

T = TypeVar("T")

CHOICE_BALANCE = "Check balance"
CHOICE_TRANSFER = "Transfer NFT"
CHOICE_INFO = "View collection info"
CHOICE_EXIT = "Exit"

MENU_CHOICES: tuple[str, ...] = (CHOICE_BALANCE, CHOICE_TRANSFER, CHOICE_INFO, CHOICE_EXIT)


def load_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

async def _ask_menu(questionary: Any) -> str | None:
    return await questionary.select(
        "What would you like to do?",
        choices=list(MENU_CHOICES),
        use_arrow_keys=True,
    ).ask_async()


async def _ask_validated(
    questionary: Any,
    message: str,
    parse: Callable[[str], T],
    *,
    default: str = "",
) -> T:
    """Prompt for text until *parse* accepts it.

    Validation failures are printed and the same question is asked
    again; nothing reaches the network until a value parses.

    Raises
    ------
    PromptCancelledError
        If the user dismisses the prompt (questionary returns ``None``).
    """
    while True:
        answer: str | None = await questionary.text(message, default=default).ask_async()
        if answer is None:
            raise PromptCancelledError("Cancelled.")
        try:
            return parse(answer)
        except ValidationError as exc:
            render_error(exc)


async def prompt_request(
    questionary: Any,
    choice: str,
    service: ActionService,
) -> ActionRequest:
    """Collect the fields for *choice* and return a validated request."""
    if choice == CHOICE_BALANCE:
        return await _ask_validated(
            questionary,
            "Enter address to check:",
            build_balance_query,
            default=service.context.wallet.address,
        )
    if choice == CHOICE_TRANSFER:
        recipient = await _ask_validated(
            questionary,
            "Recipient address:",
            lambda raw: validate_address(raw, field="to"),
        )
        token_id = await _ask_validated(
            questionary,
            "NFT ID to transfer:",
            validate_token_id,
        )
        return TransferRequest(to=recipient, token_id=token_id)
    if choice == CHOICE_INFO:
        return MetadataQuery()
    raise ValueError(f"Unknown menu choice: {choice!r}")


# ---------------------------------------------------------------------------
# Public loop
# ---------------------------------------------------------------------------

async def run_session(
    service: ActionService,
    *,
    pause_seconds: float = MENU_PAUSE_SECONDS,
) -> int:
    """Show the menu until the user chooses Exit.

    Every action is its own error boundary: a domain error is rendered
    and the menu comes back.  Dismissing the menu itself ends the
    session like Exit does.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS`.
    """
    questionary = load_questionary()
    console.print("\n[bold]Monad NFT CLI Tool[/bold]\n")

    while True:
        choice = await _ask_menu(questionary)
        if choice is None or choice == CHOICE_EXIT:
            return exit_codes.SUCCESS

        try:
            request = await prompt_request(questionary, choice, service)
            await run_action(service, request)
        except PromptCancelledError as exc:
            console.print(f"[yellow]{exc}[/yellow]")
        except NftCliError as exc:
            render_error(exc)

        await asyncio.sleep(pause_seconds)
        console.print()
