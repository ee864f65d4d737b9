"""Configuration models and helpers for the restic client."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

CONFIG_FILENAME = "config.yaml"
DEFAULT_LOG_DIRECTORY = "logs"
DEFAULT_LOG_MAX_SIZE = "10MB"
DEFAULT_RESTIC_BINARY = "restic"

_NULL_TAG = "tag:yaml.org,2002:null"


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""


class ConfigLoader(yaml.SafeLoader):
    """Safe loader that reads every plain scalar as a string.

    All fields are paths or free text, so ``0755``, ``yes``, ``1_000`` and
    ``02:00`` stay exactly as written. Only the null resolver is kept, so an
    empty value or ``~`` still means "nothing".
    """


ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag == _NULL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(frozen=True)
class BackupConfig:
    """What to back up. ``frequency`` and ``time`` are descriptive only."""

    directories: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()
    frequency: str = ""
    time: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "BackupConfig":
        if data is None:
            raise ConfigError("The configuration must contain a 'backup' section.")
        if not isinstance(data, dict):
            raise ConfigError("The 'backup' section must be a mapping.")
        for key in ("directories", "exclude"):
            if key not in data:
                raise ConfigError(f"The 'backup' section must contain the '{key}' key (it may be an empty list).")
        return cls(
            directories=_string_tuple(data["directories"], "backup.directories"),
            exclude=_string_tuple(data["exclude"], "backup.exclude"),
            frequency=_optional_string(data.get("frequency"), "backup.frequency"),
            time=_optional_string(data.get("time"), "backup.time"),
        )

    def to_dict(self) -> Dict:
        return {
            "frequency": self.frequency,
            "time": self.time,
            "directories": list(self.directories),
            "exclude": list(self.exclude),
        }


@dataclass(frozen=True)
class LoggingConfig:
    directory: str = DEFAULT_LOG_DIRECTORY
    max_size: str = DEFAULT_LOG_MAX_SIZE

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "LoggingConfig":
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("The 'logging' section must be a mapping.")
        return cls(
            directory=_optional_string(data.get("directory"), "logging.directory") or DEFAULT_LOG_DIRECTORY,
            max_size=_optional_string(data.get("max_size"), "logging.max_size") or DEFAULT_LOG_MAX_SIZE,
        )

    def to_dict(self) -> Dict:
        return {"directory": self.directory, "max_size": self.max_size}


@dataclass(frozen=True)
class ResticConfig:
    binary: str = DEFAULT_RESTIC_BINARY

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "ResticConfig":
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("The 'restic' section must be a mapping.")
        return cls(binary=_optional_string(data.get("binary"), "restic.binary") or DEFAULT_RESTIC_BINARY)

    def to_dict(self) -> Dict:
        return {"binary": self.binary}


@dataclass(frozen=True)
class AppConfig:
    backup: BackupConfig = field(default_factory=BackupConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    restic: ResticConfig = field(default_factory=ResticConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "AppConfig":
        if not isinstance(data, dict):
            raise ConfigError("The configuration file must contain a mapping at the top level.")
        return cls(
            backup=BackupConfig.from_dict(data.get("backup")),
            logging=LoggingConfig.from_dict(data.get("logging")),
            restic=ResticConfig.from_dict(data.get("restic")),
        )

    def to_dict(self) -> Dict:
        return {
            "backup": self.backup.to_dict(),
            "logging": self.logging.to_dict(),
            "restic": self.restic.to_dict(),
        }


# ---------------------------------------------------------------------------
def _string_tuple(value, name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigError(f"'{name}' must be a list.")
    items = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            raise ConfigError(f"Every entry of '{name}' must be a path, got {item!r}.")
        items.append(str(item))
    return tuple(items)


def _optional_string(value, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ConfigError(f"'{name}' must be a plain value, got {value!r}.")
    return str(value)


# ---------------------------------------------------------------------------
def read_config_text(path: Path = Path(CONFIG_FILENAME)) -> str:
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file '{path}' not found.") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file '{path}': {exc}") from exc


def parse_config(text: str) -> AppConfig:
    try:
        data = yaml.load(text, Loader=ConfigLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML: {exc}") from exc
    return AppConfig.from_dict(data)


__all__ = [
    "AppConfig",
    "BackupConfig",
    "ConfigError",
    "LoggingConfig",
    "ResticConfig",
    "parse_config",
    "read_config_text",
]
