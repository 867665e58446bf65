"""Logging configuration for the CLI."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "PRESSROOM_LOG_LEVEL"

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Install a single Rich handler on the root logger."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not isinstance(h, RichHandler)]
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
