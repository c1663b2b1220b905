"""
Logging setup for the model store CLI.

Library modules only create loggers via ``logging.getLogger(__name__)``;
handlers are installed here, by the CLI, and never on import.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_PACKAGE_LOGGER = "model_store"


def configure_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach a Rich handler to the package logger (idempotent)."""
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger


__all__ = ["configure_logging"]
