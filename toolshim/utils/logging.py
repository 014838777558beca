"""
Logging configuration and utilities.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional


DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def setup_root_logger(log_file: Optional[Path] = None,
                     level: str = "WARNING",
                     max_file_size_mb: int = 10,
                     backup_count: int = 5):
    """
    Set up the root logger for the application.

    The console only shows records at ``level`` and above; the log file,
    when given, records everything from INFO up.

    Args:
        log_file: Optional log file path
        level: Console logging level
        max_file_size_mb: Rotate the log file after this many megabytes
        backup_count: Number of rotated log files to keep
    """
    root_logger = logging.getLogger()

    # Clear any existing handlers
    root_logger.handlers.clear()

    console_level = getattr(logging, level.upper())
    root_logger.setLevel(min(console_level, logging.INFO) if log_file else console_level)

    formatter = logging.Formatter(DETAILED_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            root_logger.addHandler(
                _rotating_handler(log_file, formatter, max_file_size_mb, backup_count)
            )
        except OSError as e:
            root_logger.warning(f"Cannot write log file {log_file}: {e}")

    logging.getLogger("pip").setLevel(logging.WARNING)


def flush_handlers() -> None:
    """Flush every root handler; used before the process image is replaced."""
    for handler in logging.getLogger().handlers:
        handler.flush()


def _rotating_handler(log_file: Path,
                      formatter: logging.Formatter,
                      max_file_size_mb: int = 10,
                      backup_count: int = 5) -> logging.Handler:
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_file_size_mb * 1024 * 1024,
        backupCount=backup_count
    )
    file_handler.setFormatter(formatter)
    return file_handler
