"""
Pity command: current pity per banner
"""

from typing import Optional

import typer
from rich.table import Table

from pityledger.core import BannerCategory, PityLedgerError
from pityledger.query import get_pity_snapshots

from ._common import console, fail, load_events, log_option, make_config, print_json


def pity_command(
    log_path: Optional[str] = log_option(),
    banner: Optional[BannerCategory] = typer.Option(None, "--banner", "-b", help="Only this banner"),
    tracked_target: Optional[str] = typer.Option(
        None, "--tracked-target", "-t", help="Weapon to chart when a pull records none"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show where each banner stands right now.

    Examples:
        pityledger pity
        pityledger pity --banner character
        pityledger pity --json
    """
    try:
        snapshots = get_pity_snapshots(load_events(log_path), make_config(tracked_target))
    except FileNotFoundError as ex:
        fail(f"Log file not found: {ex}", json_output, log_path)
    except PityLedgerError as ex:
        fail(str(ex), json_output, log_path)

    selected = [snapshots[banner]] if banner else [snapshots[b] for b in BannerCategory]

    if json_output:
        print_json({s.banner.value: s for s in selected})
        return

    table = Table(title="Current Pity")
    table.add_column("Banner", style="green")
    table.add_column("Pity", style="cyan", justify="right")
    table.add_column("To Hard Pity", style="cyan", justify="right")
    table.add_column("Guaranteed")
    table.add_column("Extra", style="yellow")

    for snap in selected:
        extra = []
        if snap.banner == BannerCategory.CHARACTER:
            extra.append(f"streak={snap.radiant_streak}")
            if snap.radiance_active:
                extra.append("radiance active")
        if snap.fate_points is not None:
            extra.append(f"fate={snap.fate_points}")
            extra.append(f"charted={snap.charted_weapon or '-'}")
        table.add_row(
            snap.banner.value,
            str(snap.pity),
            str(snap.pulls_to_hard_pity),
            "[bold]yes[/bold]" if snap.guaranteed else "no",
            ", ".join(extra) or "-",
        )

    console.print(table)
