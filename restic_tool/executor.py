"""Print or run the restic command for the selected mode."""
from __future__ import annotations

import logging
import signal
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Callable, TextIO

from .command import Command, format_command
from .modes import RunMode

LOGGER = logging.getLogger(__name__)


class ExecutionFailure(Exception):
    """Raised when the restic process cannot be started at all."""


def _default_stdout() -> TextIO:
    return sys.stdout


@dataclass
class Executor:
    launcher: Callable[..., subprocess.CompletedProcess] = subprocess.run
    stdout: TextIO = field(default_factory=_default_stdout)
    logger: logging.Logger = LOGGER

    def run(self, command: Command, mode: RunMode) -> int:
        """Execute *command* according to *mode* and return the exit code for this process.

        ``PRINT`` only writes the command line. ``DRY_RUN`` starts restic with
        the inherited terminal streams and environment, waits for it and
        returns its exit code. A child killed by a signal maps to
        ``128 + signal``; a Ctrl+C during the wait returns 130.
        """

        if mode is RunMode.PRINT:
            self.stdout.write(format_command(command) + "\n")
            self.stdout.flush()
            return 0
        if mode is RunMode.DRY_RUN:
            return self._run_process(command)
        raise ValueError(f"Mode '{mode.value}' does not run a backup command.")

    # ------------------------------------------------------------------
    def _run_process(self, command: Command) -> int:
        self.logger.info("Running: %s", format_command(command))
        try:
            result = self.launcher(command.argv, check=False)
        except (OSError, ValueError) as exc:
            # ValueError covers arguments the OS cannot take, such as an embedded NUL.
            raise ExecutionFailure(f"Cannot start '{command.program}': {exc}") from exc
        except KeyboardInterrupt:
            # Ctrl+C reaches restic too; subprocess.run has already reaped it.
            self.logger.warning("'%s' was interrupted.", command.program)
            return 128 + signal.SIGINT

        returncode = result.returncode
        if returncode < 0:
            self.logger.warning("'%s' was terminated by signal %d.", command.program, -returncode)
            return 128 - returncode
        if returncode != 0:
            self.logger.warning("'%s' exited with code %d.", command.program, returncode)
        else:
            self.logger.info("'%s' finished successfully.", command.program)
        return returncode


__all__ = ["Executor", "ExecutionFailure"]
