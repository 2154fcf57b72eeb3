"""
Stats command: descriptive statistics for one banner
"""

from typing import Optional

import typer
from rich.table import Table

from pityledger.core import BannerCategory, PityLedgerError
from pityledger.stats import analyze

from ._common import console, fail, load_events, log_option, make_config, print_json


def stats_command(
    banner: BannerCategory = typer.Option(..., "--banner", "-b", help="Banner to analyze"),
    log_path: Optional[str] = log_option(),
    tracked_target: Optional[str] = typer.Option(
        None, "--tracked-target", "-t", help="Weapon to chart when a pull records none"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show pull statistics for a banner.

    Examples:
        pityledger stats --banner character
        pityledger stats --banner weapon --json
    """
    try:
        analysis = analyze(load_events(log_path), banner, make_config(tracked_target))
    except FileNotFoundError as ex:
        fail(f"Log file not found: {ex}", json_output, log_path)
    except PityLedgerError as ex:
        fail(str(ex), json_output, log_path)

    if json_output:
        print_json(analysis)
        return

    st = analysis.stats
    table = Table(title=f"{banner.value.title()} Banner", show_header=False)
    table.add_column("Metric", style="green")
    table.add_column("Value", style="cyan", justify="right")
    table.add_row("Total pulls", str(st.total_pulls))
    table.add_row("5★", f"{st.rare_count} ({st.rare_rate:.2f}%)")
    table.add_row("4★", f"{st.uncommon_count} ({st.uncommon_rate:.2f}%)")
    table.add_row("3★", str(st.common_count))
    table.add_row("Avg 5★ pity", f"{st.average_rare_pity:.1f}")
    table.add_row("Avg 4★ pity", f"{st.average_uncommon_pity:.1f}")
    if banner in (BannerCategory.CHARACTER, BannerCategory.CHRONICLED):
        table.add_row("50/50 won / lost", f"{st.won} / {st.lost}")
        table.add_row("50/50 win rate", f"{st.win_rate:.1f}%")
    console.print(table)

    if analysis.rare_pulls:
        pulls = Table(title="5★ Pulls")
        pulls.add_column("Time", style="dim")
        pulls.add_column("Item", style="yellow")
        pulls.add_column("Pity", style="cyan", justify="right")
        pulls.add_column("Result")
        for p in analysis.rare_pulls:
            if p.annotation.was_guaranteed:
                result = "guaranteed"
            elif p.annotation.outcome:
                result = p.annotation.outcome.value
            else:
                result = "-"
            pulls.add_row(
                p.event.occurred_at.strftime("%Y-%m-%d %H:%M"),
                p.event.item_key,
                str(p.annotation.pity_count),
                result,
            )
        console.print(pulls)
