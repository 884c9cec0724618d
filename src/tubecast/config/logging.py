"""Logging setup for the Tubecast CLI."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    level: str = "INFO",
) -> logging.Logger:
    """Configure the ``tubecast`` logger.

    Console output goes through rich on stderr; an optional file handler
    records the same messages in plain text.

    Args:
        verbose: Log at DEBUG regardless of ``level``
        log_file: Optional file to additionally write logs to
        level: Base level name when not verbose

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("tubecast")
    effective_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(effective_level)

    # Re-running setup (e.g. repeated CLI invocations in tests) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
    )
    console_handler.setLevel(effective_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger
