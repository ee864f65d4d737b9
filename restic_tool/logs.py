"""Read-only access to the rotated log files."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .logging_setup import LOG_BASENAME

LOGGER = logging.getLogger(__name__)

NO_LOGS_MESSAGE = "No log files found"
UNREADABLE_MESSAGE = "Unable to read log file"


@dataclass(frozen=True)
class LogFile:
    path: Path
    size: int
    modified: int

    @property
    def name(self) -> str:
        return self.path.name

    def to_dict(self) -> Dict[str, object]:
        return {"name": self.name, "size": self.size, "modified": self.modified}


def _rotation_index(name: str) -> int:
    # restic_backup.log is the live file, restic_backup.log.1 the newest rotated one.
    suffix = name.rsplit(".", 1)[-1]
    return int(suffix) if suffix.isdigit() else 0


def list_log_files(directory: Path, prefix: str = LOG_BASENAME) -> List[LogFile]:
    """Return the log files in *directory* whose name starts with *prefix*, newest first."""

    directory = Path(directory)
    if not directory.is_dir():
        return []
    files: List[LogFile] = []
    for path in directory.iterdir():
        if not path.name.startswith(prefix) or not path.is_file():
            continue
        try:
            stat = path.stat()
        except OSError as exc:  # pragma: no cover - file rotated away mid-listing
            LOGGER.debug("Skipping log file '%s': %s", path, exc)
            continue
        files.append(LogFile(path=path, size=stat.st_size, modified=int(stat.st_mtime)))
    files.sort(key=lambda item: (-item.modified, _rotation_index(item.name), item.name))
    return files


def read_log(path: Path, lines: Optional[int] = None) -> str:
    """Return the text of *path*, or only its last *lines* lines."""

    try:
        with Path(path).open("r", encoding="utf-8", errors="replace") as fh:
            if lines is None:
                return fh.read()
            if lines <= 0:
                return ""
            return "".join(deque(fh, maxlen=lines))
    except OSError as exc:
        LOGGER.warning("Cannot read log file '%s': %s", path, exc)
        return UNREADABLE_MESSAGE


def latest_log_content(files: List[LogFile], lines: Optional[int] = None) -> str:
    if not files:
        return NO_LOGS_MESSAGE
    return read_log(files[0].path, lines)


__all__ = ["LogFile", "latest_log_content", "list_log_files", "read_log"]
