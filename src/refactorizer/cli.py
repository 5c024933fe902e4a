"""Command-line interface for replaying recorded refactoring sessions."""

from __future__ import annotations

import argparse
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.pretty import Pretty

from refactorizer import __version__
from refactorizer.config import Config, load_config
from refactorizer.errors import ActionLogError, RefactorInvariantError
from refactorizer.logging import get_logger, setup_logging
from refactorizer.recording import ActionLog, replay
from refactorizer.snapshot import state_to_dict
from refactorizer.state import ClosedState, RefactorState, describe_state
from refactorizer.store import RefactorStore

log = get_logger("cli")

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INVARIANT = 2
EXIT_BAD_LOG = 3


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="refactorizer",
        description="Replay and check recorded refactoring session actions",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (can be repeated)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file path (merged over user and project config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    replay_parser = subparsers.add_parser(
        "replay",
        help="Apply a recorded action log and print the resulting state",
    )
    replay_parser.add_argument("log", type=Path, help="Action log (.jsonl, .yaml)")
    replay_parser.add_argument(
        "--steps",
        action="store_true",
        help="Print the state after every action, not just the last",
    )
    replay_parser.add_argument(
        "--format",
        choices=("text", "json", "yaml"),
        default="text",
        help="Output format (default: text)",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Verify that a recorded action log respects every transition rule",
    )
    check_parser.add_argument("log", type=Path, help="Action log (.jsonl, .yaml)")

    return parser


def run_cli(args: Sequence[str], console: Console | None = None) -> int:
    """Run the CLI with the given arguments and return an exit code."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return EXIT_USAGE

    config = load_config(project_root=Path.cwd(), config_file=parsed.config)
    if parsed.quiet:
        config.logging.verbose = 0
    elif parsed.verbose:
        config.logging.verbose = min(2 + parsed.verbose, 4)
    setup_logging(config.logging)

    console = console or Console()
    err_console = Console(stderr=True)

    try:
        if parsed.command == "replay":
            return _replay(parsed.log, parsed.steps, parsed.format, config, console)
        return _check(parsed.log, console)
    except ActionLogError as e:
        log.error("Unreadable action log %s: %s", parsed.log, e)
        err_console.print(f"[red]error:[/red] {parsed.log}: {e}", highlight=False)
        return EXIT_BAD_LOG


def _replay(
    path: Path, steps: bool, output_format: str, config: Config, console: Console
) -> int:
    snapshots: list[dict[str, Any]] = []
    store = RefactorStore(config=config)

    with ActionLog(path) as action_log:
        try:
            for index, action in enumerate(action_log, start=1):
                state = store.dispatch(action)
                if steps:
                    snapshots.append(
                        {"step": index, "action": str(action.type), "state": state_to_dict(state)}
                    )
        except RefactorInvariantError as e:
            if steps:
                _print_output(snapshots, output_format, console)
            console.print(f"[red]invariant violation:[/red] {e}", highlight=False)
            return EXIT_INVARIANT

    if steps:
        _print_output(snapshots, output_format, console)
    else:
        _print_output(state_to_dict(store.state), output_format, console)
    return EXIT_OK


def _check(path: Path, console: Console) -> int:
    count = 0
    state: RefactorState = ClosedState()

    with ActionLog(path) as action_log:
        try:
            for count, (_action, state) in enumerate(replay(action_log), start=1):
                pass
        except RefactorInvariantError as e:
            console.print(
                f"[red]FAIL[/red] {path}: action {count + 1}: {e}", highlight=False
            )
            return EXIT_INVARIANT

    console.print(
        f"[green]OK[/green] {path}: {count} actions, final state {describe_state(state)}",
        highlight=False,
    )
    return EXIT_OK


def _print_output(data: Any, output_format: str, console: Console) -> None:
    if output_format == "json":
        console.print(json.dumps(data, indent=2, default=str), markup=False, highlight=False,
                      soft_wrap=True)
    elif output_format == "yaml":
        console.print(yaml.safe_dump(data, sort_keys=False).rstrip(), markup=False,
                      highlight=False, soft_wrap=True)
    else:
        console.print(Pretty(data))
