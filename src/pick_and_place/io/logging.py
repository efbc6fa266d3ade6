"""Define utility functions to simplify logging to the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger(__name__)
console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich, showing debug traces if `verbose` is set."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def log_info(message: str) -> None:
    """Log the given string to standard output."""
    logger.info(message)
