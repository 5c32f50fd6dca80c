"""noticore logging — Rich console plus an optional daily-rotated daemon log.

The file log records every engine decision at DEBUG (admission, stacking,
closure, history eviction) regardless of the console level, so a daemon
started without ``--verbose`` can still be diagnosed afterwards.
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from noticore.config import NotiConfig

# Shared console instance for rich output
console = Console()

_DEFAULT_LOG_DIR = Path.home() / ".noticore" / "logs"

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_FILE_DATE_FMT = "%Y-%m-%d %H:%M:%S"


def log_file_path(config: NotiConfig) -> Path | None:
    """Where the daemon log is written, or None when file logging is off."""
    if config.log_backup_days == 0:
        return None
    return (config.log_dir or _DEFAULT_LOG_DIR) / config.log_file


def setup_logging(config: NotiConfig, verbose: bool = False) -> Path | None:
    """Install the console handler and, if enabled, the rotating file handler.

    Args:
        config: Supplies log level, directory, file name and retention.
        verbose: If True, the console logs at DEBUG.

    Returns:
        Path of the file log, or None if file logging is disabled.
    """
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()

    console_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_path=verbose,
    )
    console_handler.setLevel(level)
    root.addHandler(console_handler)

    log_file = log_file_path(config)
    if log_file is None:
        root.setLevel(level)
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=str(log_file),
            when="midnight",
            backupCount=config.log_backup_days,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATE_FMT))
        root.addHandler(file_handler)
        # The file handler wants engine DEBUG records even when the console doesn't
        root.setLevel(logging.DEBUG)

    logging.getLogger(__name__).debug(
        "Logging configured: console=%s, file=%s",
        logging.getLevelName(level), log_file,
    )
    return log_file
