"""
Replay command: replay the pull log and show per-banner state
"""

from typing import Optional

import typer
from rich.table import Table

from pityledger.core import BannerCategory, PityLedgerError, state_hash
from pityledger.replay import replay as replay_events
from pityledger.stats import summarize_by_banner

from ._common import console, fail, load_events, log_option, make_config, print_json


def replay_command(
    log_path: Optional[str] = log_option(),
    tracked_target: Optional[str] = typer.Option(
        None, "--tracked-target", "-t", help="Weapon to chart when a pull records none"
    ),
    until: Optional[str] = typer.Option(None, "--until", "-u", help="Replay until this pull id (inclusive)"),
    show_annotations: bool = typer.Option(False, "--show-annotations", "-a", help="Show rare pull annotations"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay the pull log and print the state of every banner.

    Examples:
        pityledger replay
        pityledger replay --tracked-target "Staff of Homa"
        pityledger replay --show-annotations
        pityledger replay --json
    """
    try:
        events = load_events(log_path)
        result = replay_events(events, make_config(tracked_target), to_event_id=until)
        counts = summarize_by_banner(events)
    except FileNotFoundError as ex:
        fail(f"Log file not found: {ex}", json_output, log_path)
    except PityLedgerError as ex:
        fail(str(ex), json_output, log_path)

    digest = state_hash(result.state)

    if json_output:
        output = {
            "success": True,
            "pulls_replayed": result.applied,
            "state_hash": digest,
            "pull_counts": counts,
            "state": result.state,
        }
        if show_annotations:
            output["annotations"] = result.annotations
        print_json(output)
        return

    console.print(f"[green]✓ Replayed {result.applied} pulls successfully[/green]")
    console.print(f"  State hash: [yellow]{digest}[/yellow]")

    table = Table(title="Banner State")
    table.add_column("Banner", style="green")
    table.add_column("Pulls", style="cyan", justify="right")
    table.add_column("Pity", style="cyan", justify="right")
    table.add_column("State", style="yellow")

    for banner in BannerCategory:
        banner_state = result.state.for_banner(banner).to_dict()
        pity = banner_state.pop("pity")
        detail = ", ".join(f"{k}={v}" for k, v in banner_state.items()) or "-"
        table.add_row(banner.value, str(counts[banner]), str(pity), detail)

    console.print(table)

    if show_annotations:
        ann_table = Table(title="Rare Pulls")
        ann_table.add_column("Pull ID", style="dim")
        ann_table.add_column("Banner", style="green")
        ann_table.add_column("Pity", style="cyan", justify="right")
        ann_table.add_column("Guaranteed")
        ann_table.add_column("50/50")
        ann_table.add_column("Radiance")

        for event_id, ann in result.annotations.items():
            ann_table.add_row(
                event_id[:12],
                ann.banner.value,
                str(ann.pity_count),
                "yes" if ann.was_guaranteed else "no",
                ann.outcome.value if ann.outcome else "-",
                "yes" if ann.triggered_radiance else "no",
            )

        console.print(ann_table)
