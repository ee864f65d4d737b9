import logging
import subprocess
import textwrap

import pytest

from restic_tool.config import AppConfig, BackupConfig, LoggingConfig


class FakeLauncher:
    """Stands in for ``subprocess.run`` and records every call."""

    def __init__(self, returncode=0, error=None):
        self.returncode = returncode
        self.error = error
        self.calls = []

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(argv, self.returncode)


@pytest.fixture
def fake_launcher():
    return FakeLauncher()


@pytest.fixture
def app_config(tmp_path):
    return AppConfig(
        backup=BackupConfig(
            directories=("/home/a",),
            exclude=("/home/a/tmp", "/home/a/cache"),
            frequency="daily",
            time="02:00",
        ),
        logging=LoggingConfig(directory=str(tmp_path / "logs"), max_size="1MB"),
    )


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML configuration into ``tmp_path`` and return its path."""

    def _write(text, name="config.yaml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_file(write_config, tmp_path):
    return write_config(
        f"""
        backup:
          frequency: daily
          time: 02:00
          directories:
            - /home/a
          exclude:
            - /home/a/tmp
            - /home/a/cache
        logging:
          directory: {tmp_path / "logs"}
          max_size: 1MB
        """
    )


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    # setup_logging attaches handlers to the root logger; drop them between tests.
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def make_launcher():
    return FakeLauncher
