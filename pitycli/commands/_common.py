"""
Shared helpers for CLI commands.
"""

import json
import os
from typing import Any, List, Optional

import typer
from rich.console import Console

from pityledger.core import PullEvent, ReplayConfig, canonicalize
from pityledger.log import FilePullLogStore
from pityledger.logging_config import get_logger

DEFAULT_LOG_PATH = "pulls.jsonl"

console = Console()


def default_log_path() -> str:
    return os.getenv("PITYLEDGER_LOG_PATH", DEFAULT_LOG_PATH)


def log_option():
    return typer.Option(
        None,
        "--log",
        "-l",
        help="Path to pull log file (default: $PITYLEDGER_LOG_PATH or ./pulls.jsonl)",
    )


def open_store(log_path: Optional[str], must_exist: bool = True) -> FilePullLogStore:
    """
    Open the pull log at log_path or the default location.

    Raises:
        FileNotFoundError: If must_exist and the log does not exist
    """
    path = log_path or default_log_path()
    if must_exist and not os.path.exists(path):
        raise FileNotFoundError(path)
    return FilePullLogStore(path)


def load_events(log_path: Optional[str]) -> List[PullEvent]:
    return open_store(log_path).load()


def make_config(tracked_target: Optional[str]) -> ReplayConfig:
    return ReplayConfig().with_tracked_target(tracked_target)


def print_json(obj: Any) -> None:
    print(json.dumps(canonicalize(obj), indent=2, ensure_ascii=False))


def fail(message: str, json_output: bool, log_path: Optional[str] = None) -> None:
    """Report an error and exit with code 2."""
    get_logger(__name__, trace_id=log_path).error(message)
    if json_output:
        out = {"error": message}
        if log_path:
            out["path"] = log_path
        print(json.dumps(out))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)
