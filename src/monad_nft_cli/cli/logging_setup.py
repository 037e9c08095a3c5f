"""Diagnostic logging configuration.

Modules log through ``logging.getLogger(__name__)``; this module wires
the package logger to Rich's handler (plain stderr handler without
Rich).  Console results are printed by the CLI, not logged.
"""

from __future__ import annotations

import logging

_PACKAGE_LOGGER = "monad_nft_cli"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single handler to the package logger and set its level.

    ``WARNING`` by default, ``DEBUG`` with ``--verbose``.  Calling this
    more than once replaces the previous handler.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
                "%Y-%m-%d %H:%M:%S",
            )
        )
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger
