"""Logging setup shared by the API and the CLI."""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "anchor_text_finder"


def configure_logging(level: str = "INFO", rich_output: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        rich_output: Use a rich handler on stderr (CLI) instead of a plain
            stdout stream handler (server).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid stacking handlers when called twice
    if logger.handlers:
        return logger

    if rich_output:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

    logger.addHandler(handler)
    return logger
