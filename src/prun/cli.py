"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import json
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .config import load_config
from .console import ConsoleHost
from .dispatcher import DispatchResult, DispatchState
from .errors import ExitCode, PrunError, user_facing_error
from .logging import configure_logging, default_log_path, normalize_level
from .models import NUM_SLOTS, SLOT_FIELDS, SLOT_INDICES
from .runner import ProjectRunner

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

HostFactory = Callable[[argparse.Namespace], ConsoleHost]


def _slot_type(value: str) -> int:
    try:
        slot = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("slot must be an integer") from exc
    if slot not in SLOT_INDICES:
        raise argparse.ArgumentTypeError(f"slot must be between 1 and {NUM_SLOTS}")
    return slot


def _log_level_type(value: str) -> str:
    normalized = normalize_level(value)
    if normalized is None or normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prun", description="Run per-project command slots.")
    parser.add_argument("--config", type=Path, default=None, help="Global config TOML file")
    parser.add_argument("--project", type=Path, default=None, help="Project directory (default: cwd)")
    parser.add_argument("--file", type=Path, default=None, help="Current file for %%f and %%F")
    parser.add_argument("--window", default=None, help="tmux window that receives commands")
    parser.add_argument("--default-pre", default=None, help="Global pre command")
    parser.add_argument("--default-post", default=None, help="Global post command")
    parser.add_argument("--log-level", type=_log_level_type, default="WARN")
    parser.add_argument("--log-file", type=Path, default=None)

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="Show all slots")
    list_cmd.add_argument("--json", action="store_true", help="Print the slots as JSON")

    run_cmd = commands.add_parser("run", help="Run a slot")
    run_cmd.add_argument("slot", type=_slot_type)

    edit_cmd = commands.add_parser("edit", help="Edit a slot field")
    edit_cmd.add_argument("slot", type=_slot_type)
    edit_cmd.add_argument("--field", choices=SLOT_FIELDS, default=None)
    edit_cmd.add_argument("--value", default=None)

    delete_cmd = commands.add_parser("delete", help="Clear a slot")
    delete_cmd.add_argument("slot", type=_slot_type)

    defaults_cmd = commands.add_parser("defaults", help="Set project pre/post defaults")
    defaults_cmd.add_argument("--pre", default=None)
    defaults_cmd.add_argument("--post", default=None)

    commands.add_parser("manage", help="Pick a slot and an action interactively")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def build_host(namespace: argparse.Namespace) -> ConsoleHost:
    answers: list[str] = []
    if namespace.command == "edit" and namespace.field is not None:
        answers.append(namespace.field)
        if namespace.value is not None:
            answers.append(namespace.value)
    return ConsoleHost(project_dir=namespace.project, file_path=namespace.file, answers=answers)


def _print_slots(runner: ProjectRunner, host: ConsoleHost, *, as_json: bool) -> None:
    slots = runner.list()
    if as_json:
        payload = {str(index): slot.model_dump() for index, slot in slots.items()}
        print(json.dumps(payload, indent=2), file=host.stdout)
        return
    for label, index in zip(runner.slot_labels(), SLOT_INDICES):
        slot = slots[index]
        extras = "".join(f" [{name}: {getattr(slot, name)}]" for name in SLOT_FIELDS[1:] if getattr(slot, name))
        print(f"{label}{extras}", file=host.stdout)


def run_cli_flow(namespace: argparse.Namespace, host: ConsoleHost) -> int:
    runner = ProjectRunner(host, config=load_config(namespace.config))
    runner.configure(
        {
            "window_id": namespace.window,
            "default_pre": namespace.default_pre,
            "default_post": namespace.default_post,
        }
    )

    command = namespace.command
    if command == "list":
        _print_slots(runner, host, as_json=namespace.json)
    elif command == "run":
        outcomes: list[DispatchResult] = []
        runner.run(namespace.slot, outcomes.append)
        if outcomes and outcomes[-1].state == DispatchState.ABORTED:
            return int(outcomes[-1].exit_code)
    elif command == "edit":
        runner.edit(namespace.slot)
    elif command == "delete":
        runner.delete(namespace.slot)
    elif command == "defaults":
        runner.set_project_defaults(pre=namespace.pre, post=namespace.post)
    elif command == "manage":
        runner.manage()
    return int(ExitCode.SUCCESS)


def main(
    argv: Sequence[str] | None = None,
    *,
    host_factory: HostFactory | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging("WARN", log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level, log_file=log_path)

    try:
        host = (host_factory or build_host)(namespace)
        logger.debug("Starting CLI command=%s project=%s", namespace.command, host.cwd())
        return run_cli_flow(namespace, host)
    except PrunError as exc:
        logger.error(
            "Handled PrunError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
