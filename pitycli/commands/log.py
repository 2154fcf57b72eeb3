"""
Pull log commands: import, tail, compact
"""

import json
from typing import Any, Dict, List, Optional

import typer
from rich.table import Table

from pityledger.core import PityLedgerError, order_events
from pityledger.log import event_from_record

from ._common import console, fail, log_option, open_store, print_json

app = typer.Typer()


def _read_records(path: str) -> List[Dict[str, Any]]:
    """Read a JSON array or JSONL file of pull records."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    stripped = text.lstrip()
    if stripped.startswith("["):
        return json.loads(stripped)
    return [json.loads(line) for line in text.splitlines() if line.strip()]


@app.command("import")
def import_pulls(
    source: str = typer.Argument(..., help="JSON array or JSONL file of pull records"),
    log_path: Optional[str] = log_option(),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Import pulls into the log, superseding earlier records with the same external_id.

    Examples:
        pityledger log import export.json
        pityledger log import manual.jsonl --log pulls.jsonl
    """
    try:
        records = _read_records(source)
        events = [event_from_record(rec) for rec in records]
        result = open_store(log_path, must_exist=False).upsert(events)
    except FileNotFoundError as ex:
        fail(f"File not found: {ex}", json_output, log_path)
    except ValueError as ex:
        fail(f"Invalid JSON in {source}: {ex}", json_output, log_path)
    except PityLedgerError as ex:
        fail(str(ex), json_output, log_path)

    if json_output:
        print_json(
            {
                "added": result.added,
                "updated": result.updated,
                "unchanged": result.unchanged,
                "total": len(result.events),
            }
        )
        return

    console.print(
        f"[green]✓ Imported {len(events)} pulls[/green] "
        f"(added {result.added}, updated {result.updated}, unchanged {result.unchanged})"
    )
    console.print(f"  Log now holds [cyan]{len(result.events)}[/cyan] pulls")


@app.command()
def tail(
    log_path: Optional[str] = log_option(),
    lines: Optional[int] = typer.Option(None, "--lines", "-n", min=1, help="Number of pulls to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the most recent pulls in the log, newest last.

    Examples:
        pityledger log tail
        pityledger log tail --lines 10
        pityledger log tail --json
    """
    try:
        events = order_events(open_store(log_path).load())
    except FileNotFoundError as ex:
        fail(f"Log file not found: {ex}", json_output, log_path)
    except PityLedgerError as ex:
        fail(str(ex), json_output, log_path)

    if lines is not None:
        events = events[-lines:]

    if json_output:
        print_json({"events": events, "count": len(events)})
        return

    if not events:
        console.print("[yellow]Pull log is empty[/yellow]")
        return

    table = Table(title="Pull Log")
    table.add_column("Time", style="dim")
    table.add_column("Banner", style="green")
    table.add_column("Item", style="yellow")
    table.add_column("Rarity", style="cyan", justify="right")
    table.add_column("External ID", style="dim")

    for ev in events:
        table.add_row(
            ev.occurred_at.strftime("%Y-%m-%d %H:%M:%S"),
            ev.banner.value,
            ev.item_key,
            f"{int(ev.rarity)}★",
            ev.external_id,
        )

    console.print(table)


@app.command()
def compact(log_path: Optional[str] = log_option()):
    """
    Rewrite the log with one line per pull, dropping superseded records.
    """
    try:
        dropped = open_store(log_path).compact()
    except FileNotFoundError as ex:
        fail(f"Log file not found: {ex}", False, log_path)
    except PityLedgerError as ex:
        fail(str(ex), False, log_path)

    console.print(f"[green]✓ Compacted pull log[/green], dropped {dropped} superseded records")
