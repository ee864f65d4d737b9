"""Translate the backup configuration into a restic invocation."""
from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import List, Tuple

from .config import AppConfig

BACKUP_SUBCOMMAND = "backup"
EXCLUDE_FLAG = "--exclude"
DRY_RUN_FLAG = "--dry-run"


@dataclass(frozen=True)
class Command:
    program: str
    args: Tuple[str, ...] = ()

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]


def build_command(config: AppConfig, dry_run: bool = False) -> Command:
    """Return the ``restic backup`` command for *config*.

    Directories come first in their configured order, then one
    ``--exclude VALUE`` pair per exclude, then ``--dry-run`` when requested.
    Nothing else is added and the filesystem is never touched.
    """

    args: List[str] = [BACKUP_SUBCOMMAND]
    args.extend(config.backup.directories)
    for pattern in config.backup.exclude:
        args.extend((EXCLUDE_FLAG, pattern))
    if dry_run:
        args.append(DRY_RUN_FLAG)
    return Command(program=config.restic.binary, args=tuple(args))


def format_command(command: Command) -> str:
    """Render *command* as a single shell-quoted line that can be pasted into a terminal."""

    return shlex.join(command.argv)


__all__ = ["Command", "build_command", "format_command"]
