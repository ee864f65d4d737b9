from restic_tool.command import Command, build_command, format_command
from restic_tool.config import AppConfig, BackupConfig, ResticConfig


def make_config(directories=(), exclude=(), binary="restic"):
    return AppConfig(
        backup=BackupConfig(directories=tuple(directories), exclude=tuple(exclude)),
        restic=ResticConfig(binary=binary),
    )


def test_directories_then_exclude_pairs():
    command = build_command(make_config(["d1", "d2"], ["e1"]))
    assert command == Command(program="restic", args=("backup", "d1", "d2", "--exclude", "e1"))


def test_no_exclude_flag_without_excludes():
    command = build_command(make_config(["/srv", "/etc"]))
    assert "--exclude" not in command.args
    assert command.args == ("backup", "/srv", "/etc")


def test_dry_run_flag_is_appended_once_at_the_end():
    command = build_command(make_config(["d1"], ["e1", "e2"]), dry_run=True)
    assert command.args == ("backup", "d1", "--exclude", "e1", "--exclude", "e2", "--dry-run")
    assert command.args.count("--dry-run") == 1


def test_empty_directories_yield_only_exclude_flags():
    assert build_command(make_config([], ["e1"])).args == ("backup", "--exclude", "e1")
    assert build_command(make_config()).args == ("backup",)


def test_builder_is_repeatable(app_config):
    assert build_command(app_config, dry_run=True) == build_command(app_config, dry_run=True)
    assert build_command(app_config) == build_command(app_config)


def test_configured_binary_is_the_program():
    command = build_command(make_config(["d1"], binary="/usr/local/bin/restic"))
    assert command.program == "/usr/local/bin/restic"
    assert command.argv == ["/usr/local/bin/restic", "backup", "d1"]


def test_format_command_keeps_argument_order(app_config):
    line = format_command(build_command(app_config))
    assert line == "restic backup /home/a --exclude /home/a/tmp --exclude /home/a/cache"


def test_format_command_quotes_paths_with_spaces():
    line = format_command(build_command(make_config(["/home/a/My Documents"], ["*.tmp"])))
    assert line == "restic backup '/home/a/My Documents' --exclude '*.tmp'"
