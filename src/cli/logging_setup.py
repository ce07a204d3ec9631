"""Logging configuration.

Records go through the standard `logging` module under the `rrr` namespace
and are rendered by Rich on standard error, next to the progress spinner.
Standard output stays reserved for response bodies.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from core.config import APP_NAME


def configure_logging(console: Console, *, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=console,
        show_path=False,
        show_time=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
