"""
Logging configuration for productsvc.

Sets up the ``productsvc`` logger with rich console output and optional file output.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


class FileFormatter(logging.Formatter):
    """Formatter for file logs - clean and parseable."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


# Map string level names to logging constants
LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(level: str | int) -> int:
    """
    Parse logging level from string or int.

    Args:
        level: Logging level as string (DEBUG, INFO, etc.) or int

    Returns:
        Logging level constant
    """
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level_upper = level.upper()
        if level_upper in LEVEL_MAP:
            return LEVEL_MAP[level_upper]
    # Default to INFO if invalid
    return logging.INFO


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    format_string: str | None = None,
    file_mode: str = "a",
    console_enabled: bool = True,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Setup logging configuration for productsvc.

    Args:
        level: Logging level as string (DEBUG, INFO, etc.) or int (default: INFO)
        log_file: Optional file path to write logs to (default: None, console only)
        format_string: Optional format string for the plain console handler
        file_mode: File mode for file handler - 'a' for append, 'w' for overwrite (default: 'a')
        console_enabled: Whether to enable console logging (default: True)
        use_rich: Whether to use RichHandler for console output (default: True)

    Returns:
        Logger instance
    """
    logger = logging.getLogger("productsvc")

    # Only clear handlers from this specific logger, not root or child loggers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level_int = _parse_level(level)
    logger.setLevel(level_int)

    if console_enabled:
        if use_rich:
            logger.addHandler(
                RichHandler(
                    console=Console(stderr=True),
                    level=level_int,
                    show_time=True,
                    show_path=False,
                    markup=False,
                    rich_tracebacks=True,
                    tracebacks_show_locals=False,
                    log_time_format="[%X]",
                )
            )
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level_int)
            console_handler.setFormatter(
                logging.Formatter(format_string or "%(levelname)s: %(asctime)s - %(name)s - %(message)s")
            )
            logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode=file_mode)
        # File captures everything the logger lets through
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter())
        logger.addHandler(file_handler)

    logger.propagate = True
    return logger


def setup_logging_from_config(config: dict[str, Any], base_dir: Path | None = None) -> logging.Logger:
    """
    Setup logging from the ``logging`` section of a configuration mapping.

    Recognised keys: ``level``, ``file``, ``file_mode``, ``format``,
    ``console_enabled`` and ``console_type`` (``rich`` or ``plain``).

    Args:
        config: Configuration dictionary (the full root, not just the section)
        base_dir: Optional directory for resolving relative log file paths

    Returns:
        Logger instance
    """
    logging_config = config.get("logging") or {}

    level = logging_config.get("level", logging.INFO)
    log_file = logging_config.get("file")
    console_enabled = logging_config.get("console_enabled", True)
    console_type = logging_config.get("console_type", "rich")

    if log_file and base_dir:
        log_file = Path(log_file)
        if not log_file.is_absolute():
            log_file = base_dir / log_file

    return setup_logging(
        level=level,
        log_file=log_file,
        format_string=logging_config.get("format"),
        file_mode=logging_config.get("file_mode", "a"),
        console_enabled=console_enabled,
        use_rich=console_type == "rich",
    )


def get_logger(name: str = "productsvc") -> logging.Logger:
    """
    Get a logger instance under the productsvc hierarchy.

    Args:
        name: Logger name (default: "productsvc")

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
