"""Helper utilities for the restic backup client."""
from __future__ import annotations

import re
from pathlib import Path

_SIZE_UNITS = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}

_SIZE_PATTERN = re.compile(r"^(\d+)\s*([KMG]B)$")


def ensure_directory(path: Path) -> Path:
    """Create *path* if it does not exist and return it."""

    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def parse_size(value: str) -> int:
    """Convert a size such as ``"10MB"`` or ``"100 kb"`` to a number of bytes.

    Only the ``KB``, ``MB`` and ``GB`` units are understood; they are powers
    of 1024. Other units and a size of zero raise :class:`ValueError`.
    """

    normalized = str(value).strip().upper()
    match = _SIZE_PATTERN.match(normalized)
    if not match:
        raise ValueError(f"Invalid size '{value}'. Use a whole number followed by KB, MB or GB.")
    number, unit = match.groups()
    if int(number) == 0:
        raise ValueError(f"Invalid size '{value}'. The size must be greater than zero.")
    return int(number) * _SIZE_UNITS[unit]


__all__ = ["ensure_directory", "parse_size"]
