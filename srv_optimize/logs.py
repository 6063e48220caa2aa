"""
Logging setup.

Every message goes to the console (rich) and the detailed log file as
`[LEVEL] message`. SUMMARY records additionally go to the summary log.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "srv_optimize"

SUMMARY = 25
logging.addLevelName(SUMMARY, "SUMMARY")

_CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_SUMMARY_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _SummaryOnly(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno == SUMMARY


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


def summary(message: str, logger: Optional[logging.Logger] = None):
    """Log one completed optimization category."""
    (logger or get_logger()).log(SUMMARY, message)


def configure_logging(
    log_file: str,
    summary_file: str,
    console: Optional[Console] = None,
    level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Attach console, detailed-log and summary-log handlers.

    Calling it again replaces the previous handlers.

    Args:
        log_file: Detailed append-only log
        summary_file: One line per completed optimization category
        console: Rich console for terminal output
        level: Logger level (DEBUG keeps command output in the log file)

    Returns:
        The package logger
    """
    logger = get_logger()
    reset_logging()
    logger.setLevel(level)

    for path in (log_file, summary_file):
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    console_handler = RichHandler(
        console=console or Console(),
        level=logging.INFO,
        show_time=False,
        show_level=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))

    summary_handler = logging.FileHandler(summary_file, mode="a", encoding="utf-8")
    summary_handler.addFilter(_SummaryOnly())
    summary_handler.setFormatter(logging.Formatter(_SUMMARY_FORMAT, datefmt=_DATE_FORMAT))

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    logger.addHandler(summary_handler)

    return logger


def reset_logging():
    """Detach and close every handler on the package logger."""
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def log_banner(logger: Optional[logging.Logger] = None):
    """Write the start-of-run banner."""
    logger = logger or get_logger()
    logger.info("====================")
    logger.info(f"Server Optimization Script Started at {datetime.now().strftime('%a %b %d %H:%M:%S %Y')}")
    logger.info("====================")
