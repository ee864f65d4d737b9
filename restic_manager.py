"""Command line interface for the restic backup client."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, Optional

from restic_tool.command import build_command
from restic_tool.config import AppConfig, ConfigError, parse_config, read_config_text
from restic_tool.dashboard import ServerBindError, create_app, serve
from restic_tool.executor import ExecutionFailure, Executor
from restic_tool.logging_setup import setup_logging
from restic_tool.modes import RunContext, RunMode, UsageError, parse_mode

LOGGER = logging.getLogger("restic_manager")

EXIT_FAILURE = 1
EXIT_USAGE = 2


def load_application_config(path: Path):
    text = read_config_text(path)
    return parse_config(text), text


def log_startup(config: AppConfig, mode: RunMode) -> None:
    backup = config.backup
    LOGGER.info("Better Restic Client starting up (mode: %s)", mode.value)
    LOGGER.info("Backup frequency: %s", backup.frequency)
    LOGGER.info("Backup time: %s", backup.time)
    LOGGER.info("Backup directories: %s", list(backup.directories))
    LOGGER.info("Exclude directories: %s", list(backup.exclude))
    LOGGER.info("Log directory: %s", config.logging.directory)
    LOGGER.info("Max log size: %s", config.logging.max_size)


def handle_command(context: RunContext, executor: Executor) -> int:
    command = build_command(context.config, dry_run=context.mode is RunMode.DRY_RUN)
    try:
        return executor.run(command, context.mode)
    except ExecutionFailure as exc:
        LOGGER.error("%s", exc)
        print(f"Error: backup command failed to start: {exc}", file=sys.stderr)
        return EXIT_FAILURE


def handle_serve(context: RunContext, serve_dashboard: Callable = serve) -> int:
    app = create_app(context)
    try:
        serve_dashboard(app, context.host, context.port)
    except ServerBindError as exc:
        LOGGER.error("%s", exc)
        print(f"Error: dashboard could not start: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        LOGGER.info("Dashboard stopped.")
    return 0


def dispatch(
    context: RunContext,
    executor: Optional[Executor] = None,
    serve_dashboard: Callable = serve,
) -> int:
    """Run the single action selected by ``context.mode`` and return the exit code."""

    if context.mode is RunMode.SERVE:
        return handle_serve(context, serve_dashboard)
    return handle_command(context, executor or Executor())


def main(
    argv: Optional[Iterable[str]] = None,
    executor: Optional[Executor] = None,
    serve_dashboard: Callable = serve,
) -> int:
    try:
        mode, args = parse_mode(argv)
    except UsageError as exc:
        print(f"{exc.usage}restic-manager: error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    config_path = Path(args.config)
    try:
        config, text = load_application_config(config_path)
    except ConfigError as exc:
        print(f"Error: cannot load configuration '{config_path}': {exc}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        setup_logging(config.logging, args.verbose)
    except ValueError as exc:
        print(f"Error: invalid logging.max_size in '{config_path}': {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except OSError as exc:
        print(f"Error: cannot set up logging in '{config.logging.directory}': {exc}", file=sys.stderr)
        return EXIT_FAILURE

    log_startup(config, mode)
    context = RunContext(
        mode=mode,
        config=config,
        config_path=config_path,
        config_text=text,
        host=args.host,
        port=args.port,
    )
    return dispatch(context, executor=executor, serve_dashboard=serve_dashboard)


if __name__ == "__main__":
    sys.exit(main())
