"""
Logging configuration for contentsync.

Console output goes through Rich on stderr so it interleaves cleanly with the
progress line on stdout; an optional file handler captures everything.
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

THIRD_PARTY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")


class FileFormatter(logging.Formatter):
    """Formatter for file logs - clean and parseable."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with full exception info for errors."""
        result = super().format(record)

        if record.exc_info and not record.exc_text:
            import traceback

            result += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return result


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
    file_mode: str = "a",
    use_rich: bool = True,
) -> logging.Logger:
    """
    Setup logging configuration for contentsync.

    Args:
        level: Logging level as string (DEBUG, INFO, etc.) or int (default: INFO)
        log_file: Optional file path to write logs to (default: None, console only)
        file_mode: File mode for file handler - 'a' for append, 'w' for overwrite (default: 'a')
        use_rich: Whether to use RichHandler for the console (default: True)

    Returns:
        Logger instance
    """
    logger = logging.getLogger("contentsync")

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    level_int = _parse_level(level)
    logger.setLevel(level_int)

    # boto stack is chatty at DEBUG; only let it through when we are verbose too
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level_int <= logging.DEBUG else logging.WARNING)

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
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level_int)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(asctime)s - %(message)s"))
        logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode=file_mode)
        # File captures everything the logger lets through
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "contentsync") -> logging.Logger:
    """
    Get a logger instance under the contentsync namespace.

    Args:
        name: Logger name (default: "contentsync")

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
