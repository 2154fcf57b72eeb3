#!/usr/bin/env python3
"""
Pity Ledger CLI - pull history replay and pity tracking

Main entrypoint for the pityledger command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from pitycli.commands import log, pity, replay, stats
from pityledger.logging_config import setup_logging

# Initialize Typer app
app = typer.Typer(
    name="pityledger",
    help="Replay gacha pull history into pity state and statistics",
    add_completion=False,
)

console = Console()


@app.callback()
def configure():
    """Replay gacha pull history into pity state and statistics."""
    setup_logging()


app.add_typer(log.app, name="log", help="Pull log operations")

app.command("replay")(replay.replay_command)
app.command("pity")(pity.pity_command)
app.command("stats")(stats.stats_command)


@app.command()
def version():
    """Show version information."""
    from pitycli import __version__
    from pityledger import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Pity Ledger CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
