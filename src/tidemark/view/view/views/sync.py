# SPDX-License-Identifier: MIT

from collections import Counter
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from tidemark.model.load import LoadStats
from tidemark.view.view.views.header import header


def sync_report(
    load_stats: list[LoadStats],
    generation: int,
    counts: dict[str, int],
    outcomes: Optional[Counter[str]] = None,
) -> None:
    header("sync", f"store generation {generation}")

    table = Table(box=box.SIMPLE)
    table.add_column("kind")
    table.add_column("table")
    table.add_column("fetched", justify="right")
    table.add_column("loaded", justify="right")
    table.add_column("dropped", justify="right")
    table.add_column("in store", justify="right")

    for stats in load_stats:
        table.add_row(
            stats["kind"],
            stats["table"],
            str(stats["fetched"]),
            str(stats["loaded"]),
            f"[red]{stats['dropped']}[/red]" if stats["dropped"] else "0",
            str(counts.get(stats["kind"], 0)),
        )

    console = Console()
    console.print(table)

    if outcomes:
        changes_table = Table(box=box.SIMPLE)
        changes_table.add_column("change outcome")
        changes_table.add_column("count", justify="right")
        for outcome, count in sorted(outcomes.items()):
            changes_table.add_row(outcome, str(count))
        console.print(changes_table)
