"""Logging setup with rich console output.

Usage:
    from repo_audit.core.log import get_logger

    logger = get_logger(__name__)
    logger.debug("Running: git log")
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; handlers live on the root logger."""
    return logging.getLogger(name)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once at the CLI entry point.

    ``LOG_LEVEL`` in the environment is used when no level is given.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "WARNING")

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(rich_handler)
