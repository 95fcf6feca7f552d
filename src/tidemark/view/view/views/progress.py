# SPDX-License-Identifier: MIT

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table

from tidemark.model.performance import PortfolioSummary, ProjectPerformance
from tidemark.time import date_to_display_str
from tidemark.view.view.util import format_hours, format_money, format_percent
from tidemark.view.view.views.header import header


def progress_report(
    performances: list[ProjectPerformance],
    summary: PortfolioSummary,
    today: pendulum.Date,
) -> None:
    header("progress", f"as of {date_to_display_str(today)}")

    table = Table(box=box.SIMPLE)
    table.add_column("project")
    table.add_column("status")
    table.add_column("progress", justify="right")
    table.add_column("planned", justify="right")
    table.add_column("hours", justify="right")
    table.add_column("cost", justify="right")
    table.add_column("to finish", justify="right")
    table.add_column("sold", justify="right")
    table.add_column("result", justify="right")
    table.add_column("margin", justify="right")
    table.add_column("delayed", justify="right")

    for performance in performances:
        behind = (
            performance["planned_progress"] is not None
            and performance["progress"] < performance["planned_progress"]
        )
        progress = format_percent(performance["progress"])
        table.add_row(
            performance["project_name"],
            performance["status"],
            f"[red]{progress}[/red]" if behind else progress,
            format_percent(performance["planned_progress"]),
            format_hours(performance["hours_logged"]),
            format_money(performance["committed_cost"]),
            format_money(performance["cost_to_finish"]),
            format_money(performance["sold_value"]),
            format_money(performance["result"]),
            format_percent(performance["margin"]),
            str(performance["delayed_tasks"]),
        )

    console = Console()
    console.print(table)

    summary_table = Table(box=box.SIMPLE, show_header=False)
    summary_table.add_column("metric", style="cyan")
    summary_table.add_column("value", justify="right")
    summary_table.add_row(
        "active projects",
        f"{summary['active_project_count']} / {summary['project_count']}",
    )
    summary_table.add_row("sold", format_money(summary["sold_value"]))
    summary_table.add_row("committed", format_money(summary["committed_cost"]))
    summary_table.add_row("forecast to finish", format_money(summary["cost_to_finish"]))
    summary_table.add_row("estimated result", format_money(summary["estimated_result"]))
    summary_table.add_row("global progress", format_percent(summary["global_progress"]))
    summary_table.add_row("delayed tasks", str(summary["delayed_task_count"]))
    console.print(summary_table)
