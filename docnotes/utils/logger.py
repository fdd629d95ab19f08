"""Logging configuration using Loguru.

Modules log through `get_logger(__name__)`, which binds the module name
into the record's `extra`. Both sinks print that name so log lines from
the store, the controller and the HTTP layer can be told apart.
"""

import sys
from pathlib import Path

from loguru import logger

from docnotes.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} - {message}"


def setup_logging(config: LoggingConfig | None = None, level: str | None = None) -> None:
    """
    Configure Loguru sinks for DocNotes.

    Args:
        config: Logging settings (default: LoggingConfig defaults)
        level: Overrides config.level, e.g. for a --debug flag
    """
    config = config or LoggingConfig()
    level = level or config.level

    logger.remove()
    # Records logged without get_logger still format
    logger.configure(extra={"module": "docnotes"})

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True, serialize=False)

    if config.log_to_file:
        log_path = Path(config.log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Notes are user data, so only operational events end up here
        logger.add(
            log_path / "docnotes_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=config.file_rotation,
            retention=config.file_retention,
            compression=config.compression,
            serialize=config.serialize,
            enqueue=True,
        )


def get_logger(name: str):
    """Get a logger instance for a module."""
    return logger.bind(module=name)
