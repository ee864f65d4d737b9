import io
import os

import pytest

from restic_tool.command import Command, build_command
from restic_tool.executor import ExecutionFailure, Executor
from restic_tool.modes import RunMode


def test_print_mode_never_starts_a_process(app_config, fake_launcher):
    out = io.StringIO()
    executor = Executor(launcher=fake_launcher, stdout=out)

    code = executor.run(build_command(app_config), RunMode.PRINT)

    assert code == 0
    assert fake_launcher.calls == []
    assert out.getvalue() == "restic backup /home/a --exclude /home/a/tmp --exclude /home/a/cache\n"


def test_dry_run_launches_restic_with_inherited_streams(app_config, fake_launcher):
    executor = Executor(launcher=fake_launcher, stdout=io.StringIO())

    code = executor.run(build_command(app_config, dry_run=True), RunMode.DRY_RUN)

    assert code == 0
    assert len(fake_launcher.calls) == 1
    argv, kwargs = fake_launcher.calls[0]
    assert argv[0] == "restic"
    assert argv[-1] == "--dry-run"
    # No capture, no custom environment: restic writes straight to the terminal.
    assert kwargs == {"check": False}


def test_dry_run_propagates_child_exit_code(app_config, make_launcher):
    launcher = make_launcher(returncode=3)
    executor = Executor(launcher=launcher, stdout=io.StringIO())

    assert executor.run(build_command(app_config, dry_run=True), RunMode.DRY_RUN) == 3


def test_signal_termination_maps_to_128_plus_signal(app_config, make_launcher):
    launcher = make_launcher(returncode=-9)
    executor = Executor(launcher=launcher, stdout=io.StringIO())

    assert executor.run(build_command(app_config, dry_run=True), RunMode.DRY_RUN) == 137


def test_spawn_failure_raises_execution_failure(app_config, make_launcher):
    launcher = make_launcher(error=FileNotFoundError(2, "No such file or directory", "restic"))
    executor = Executor(launcher=launcher, stdout=io.StringIO())

    with pytest.raises(ExecutionFailure, match="Cannot start 'restic'") as excinfo:
        executor.run(build_command(app_config, dry_run=True), RunMode.DRY_RUN)
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
    assert len(launcher.calls) == 1


def test_missing_binary_with_real_launcher(tmp_path):
    missing = str(tmp_path / "no-such-restic")
    executor = Executor(stdout=io.StringIO())

    with pytest.raises(ExecutionFailure):
        executor.run(Command(program=missing, args=("backup", "--dry-run")), RunMode.DRY_RUN)


@pytest.mark.skipif(os.name != "posix", reason="uses /bin/sh")
def test_real_child_exit_code_is_returned():
    executor = Executor(stdout=io.StringIO())
    command = Command(program="/bin/sh", args=("-c", "exit 3"))

    assert executor.run(command, RunMode.DRY_RUN) == 3


def test_serve_mode_is_not_executed(app_config, fake_launcher):
    executor = Executor(launcher=fake_launcher, stdout=io.StringIO())

    with pytest.raises(ValueError):
        executor.run(build_command(app_config), RunMode.SERVE)
    assert fake_launcher.calls == []


def test_ctrl_c_during_dry_run_returns_130(app_config, make_launcher):
    launcher = make_launcher(error=KeyboardInterrupt())
    executor = Executor(launcher=launcher, stdout=io.StringIO())

    assert executor.run(build_command(app_config, dry_run=True), RunMode.DRY_RUN) == 130


def test_null_byte_in_argument_is_an_execution_failure(tmp_path):
    executor = Executor(stdout=io.StringIO())
    command = Command(program="restic", args=("backup", "/a\0b", "--dry-run"))

    # The real subprocess.run rejects NUL bytes with ValueError before spawning.
    with pytest.raises(ExecutionFailure, match="null byte"):
        executor.run(command, RunMode.DRY_RUN)
