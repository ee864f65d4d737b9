"""Logging configuration: a size-rotated log file plus console output on stderr."""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import LoggingConfig
from .utils import ensure_directory, parse_size

LOG_BASENAME = "restic_backup"
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_HANDLER_MARK = "_restic_manager_handler"


def console_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def log_file_path(logging_config: LoggingConfig) -> Path:
    return Path(logging_config.directory) / f"{LOG_BASENAME}.log"


def setup_logging(logging_config: LoggingConfig, verbose: int = 0) -> logging.Logger:
    """Attach the rotating file handler and the stderr handler to the root logger.

    The file always receives INFO and above; the console level follows
    ``verbose``. Handlers installed by an earlier call are replaced, so the
    function is safe to call more than once. Raises :class:`ValueError` for
    an unparsable ``max_size`` and :class:`OSError` when the log directory
    cannot be created.
    """

    max_bytes = parse_size(logging_config.max_size)
    ensure_directory(Path(logging_config.directory))

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        str(log_file_path(logging_config)),
        maxBytes=max_bytes,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    # stdout is reserved for the printed command.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level(verbose))
    console_handler.setFormatter(formatter)

    for handler in (file_handler, console_handler):
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)
    root.setLevel(min(logging.INFO, console_handler.level))
    return root


__all__ = ["LOG_BASENAME", "console_level", "log_file_path", "setup_logging"]
