"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Action results go to stdout through :data:`console`; errors go to
stderr through :data:`err_console`.
"""

from __future__ import annotations

import contextlib
import re
import sys
from collections.abc import Iterator
from typing import Any

from monad_nft_cli.exceptions import MissingDependencyError, NftCliError

_MARKUP_PATTERN = re.compile(r"\[/?[a-z][a-z ]*\]")


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``MissingDependencyError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console(*, stderr: bool = False) -> Any:
    """Create a Rich console instance targeting stdout or stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=stderr)


def strip_markup(text: str) -> str:
    """Remove simple Rich markup tags for plain-text output."""
    return _MARKUP_PATTERN.sub("", text)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def __init__(self, *, stderr: bool = False) -> None:
        self._stderr = stderr

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain print."""
        try:
            rich_console = get_rich_console(stderr=self._stderr)
        except MissingDependencyError:
            stream = sys.stderr if self._stderr else sys.stdout
            print(*(strip_markup(str(obj)) for obj in objects), file=stream)
            return
        rich_console.print(*objects)

    @contextlib.contextmanager
    def status(self, message: str) -> Iterator[Any]:
        """Show a spinner while the body runs (a plain line without Rich).

        Yields the console that owns the spinner; lines printed through
        it are rendered above the spinner instead of through it.
        """
        try:
            rich_console = get_rich_console(stderr=self._stderr)
        except MissingDependencyError:
            self.print(message)
            yield self
            return
        with rich_console.status(message):
            yield rich_console


console = _ConsoleProxy()
err_console = _ConsoleProxy(stderr=True)


def render_error(exc: NftCliError) -> None:
    """Print a domain error and its hint to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {exc}")
    if exc.hint:
        err_console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
