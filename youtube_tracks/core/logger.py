"""
Logging configuration for youtube-tracks.

Everything logs below the "youtube_tracks" package logger, so setting up
the CLI's handlers never touches the root logger of an application that
imports the client as a library.

Outputs configured by setup_logging():
    - Console: level-colored, written through tqdm so a running download
      bar is redrawn below the message instead of being torn
    - log_full_{timestamp}.log: every record (DEBUG and above)
    - log_errors_{timestamp}.log: ERROR and CRITICAL only

The two files are only written when a log directory is configured.

Usage:
    from youtube_tracks.core.logger import setup_logging, get_logger

    setup_logging(log_dir, level="INFO")  # once, from the CLI
    logger = get_logger(__name__)         # in every module
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


PACKAGE_LOGGER = "youtube_tracks"

LOG_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ANSI_RESET = "\033[0m"
_LEVEL_ANSI = {
    logging.DEBUG: "\033[2;36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


class LevelColorFormatter(logging.Formatter):
    """
    Console formatter: "LEVEL: message" with the level name colored.

    When `show_names` is set (the CLI's --verbose), the short module name
    is added so debug output can be traced back to client or downloader.
    """

    def __init__(self, show_names: bool = False) -> None:
        super().__init__()
        self.show_names = show_names

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_ANSI.get(record.levelno, "")
        text = record.getMessage()
        if self.show_names:
            text = f"[{record.name.rsplit('.', 1)[-1]}] {text}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return f"{color}{record.levelname}{_ANSI_RESET}: {text}"


class TqdmConsoleHandler(logging.StreamHandler):
    """StreamHandler that prints with tqdm.write() to keep progress bars intact."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(stream or sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except Exception:
            self.handleError(record)


class ErrorOnlyFilter(logging.Filter):
    """Passes ERROR and CRITICAL records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _log_file_handler(path: Path, errors_only: bool = False) -> logging.FileHandler:
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(logging.ERROR if errors_only else logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT, LOG_FILE_DATE_FORMAT))
    if errors_only:
        handler.addFilter(ErrorOnlyFilter())
    return handler


def setup_logging(log_dir: Path | None = None, level: str = "INFO") -> None:
    """
    Attach console (and optionally file) handlers to the package logger.

    Calling it again replaces the handlers of the previous call.

    Args:
        log_dir: Directory for the two log files, created if missing.
                 None logs to the console only.
        level: Console level name; "DEBUG" also prints module names.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    shutdown_logging()
    package_logger.setLevel(logging.DEBUG)

    console_level = logging.getLevelName(level.upper())
    if not isinstance(console_level, int):
        console_level = logging.INFO

    console = TqdmConsoleHandler()
    console.setLevel(console_level)
    console.setFormatter(LevelColorFormatter(show_names=console_level <= logging.DEBUG))
    package_logger.addHandler(console)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        run_stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        package_logger.addHandler(_log_file_handler(log_dir / f"log_full_{run_stamp}.log"))
        package_logger.addHandler(
            _log_file_handler(log_dir / f"log_errors_{run_stamp}.log", errors_only=True)
        )


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger inside the package hierarchy.

    Module names (__name__) already start with "youtube_tracks"; any other
    name is nested under the package logger so setup_logging() covers it.
    """
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush, close and detach every handler of the package logger."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        handler.flush()
        handler.close()
        package_logger.removeHandler(handler)
