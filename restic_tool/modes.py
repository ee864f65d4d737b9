"""Run-mode selection from the command line."""
from __future__ import annotations

import argparse
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .config import CONFIG_FILENAME, AppConfig

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


class UsageError(Exception):
    """Raised for unknown or malformed command line arguments."""

    def __init__(self, message: str, usage: str = "") -> None:
        super().__init__(message)
        self.usage = usage


class RunMode(enum.Enum):
    PRINT = "print"
    DRY_RUN = "dry-run"
    SERVE = "serve"


@dataclass(frozen=True)
class RunContext:
    """Everything a single invocation needs, built once at startup."""

    mode: RunMode
    config: AppConfig
    config_path: Path
    config_text: str = ""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message, usage=self.format_usage())


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="restic-manager",
        allow_abbrev=False,
        description=(
            "Print, dry-run or inspect the restic backup described by a YAML configuration. "
            "Without flags the restic command is printed and nothing is executed."
        ),
        epilog="When several mode flags are given, --ui wins over --dry-run.",
    )
    parser.add_argument("-c", "--config", default=CONFIG_FILENAME, help="Path to the configuration file.")
    parser.add_argument(
        "-n", "--dry-run", action="store_true", help="Run 'restic backup --dry-run' with the configured paths."
    )
    parser.add_argument("-u", "--ui", action="store_true", help="Serve the read-only web dashboard.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Dashboard listen address (default: %(default)s).")
    parser.add_argument("--port", type=_port, default=DEFAULT_PORT, help="Dashboard listen port (default: %(default)s).")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase console logging verbosity.")
    return parser


def select_mode(dry_run: bool, ui: bool) -> RunMode:
    """Resolve the mode flags with the precedence ``SERVE > DRY_RUN > PRINT``."""

    if ui:
        return RunMode.SERVE
    if dry_run:
        return RunMode.DRY_RUN
    return RunMode.PRINT


def parse_mode(argv: Optional[Iterable[str]] = None) -> Tuple[RunMode, argparse.Namespace]:
    args = build_parser().parse_args(None if argv is None else list(argv))
    return select_mode(args.dry_run, args.ui), args


__all__ = [
    "RunContext",
    "RunMode",
    "UsageError",
    "build_parser",
    "parse_mode",
    "select_mode",
]
