# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from tidemark.model.rollup import ReportRow, Rollup
from tidemark.time import date_to_display_str
from tidemark.view.view.util import format_hours, format_money, format_percent
from tidemark.view.view.views.header import header


def _range_label(rollup: Rollup) -> str:
    rollup_filter = rollup["filter"]
    return (
        f"{date_to_display_str(rollup_filter['start_date'])} .. "
        f"{date_to_display_str(rollup_filter['end_date'])}"
    )


def rollup_report(rollup: Rollup) -> None:
    header("rollup", _range_label(rollup))

    table = Table(box=box.SIMPLE)
    table.add_column("client / project / collaborator")
    table.add_column("hours", justify="right")
    table.add_column("value", justify="right")
    table.add_column("share", justify="right")
    table.add_column("budget", justify="right")
    table.add_column("rate", justify="right")

    for client_line in rollup["clients"]:
        table.add_row(
            f"[bold]{client_line['client_name']}[/bold]",
            format_hours(client_line["hours"]),
            format_money(client_line["value"]),
            "",
            "",
            "",
        )
        for project_line in client_line["projects"]:
            table.add_row(
                f"  [cyan]{project_line['project_name']}[/cyan]",
                format_hours(project_line["hours"]),
                format_money(project_line["value"]),
                "",
                format_money(project_line["budget"]),
                format_money(project_line["effective_hourly_rate"]),
            )
            for line in project_line["collaborators"]:
                name = line["user_name"]
                if not line["cost_resolved"]:
                    name = f"[dim]{name} (unknown)[/dim]"
                table.add_row(
                    f"    {name}",
                    format_hours(line["hours"]),
                    format_money(line["value"]),
                    format_percent(line["share"]),
                    format_money(line["apportioned_budget"]),
                    "",
                )

    table.add_section()
    table.add_row(
        f"[bold]total ({rollup['entry_count']} entries)[/bold]",
        format_hours(rollup["hours"]),
        format_money(rollup["value"]),
        "",
        "",
        "",
    )

    console = Console()
    console.print(table)
    if rollup["unresolved_hours"] > 0:
        console.print(
            f"[yellow]{format_hours(rollup['unresolved_hours'])}h logged by unknown "
            "users are valued at 0[/yellow]"
        )


def report_rows_table(rows: list[ReportRow], rollup: Rollup) -> None:
    header("rollup rows", _range_label(rollup))

    table = Table(box=box.SIMPLE)
    for column in (
        "client",
        "project",
        "collaborator",
        "hours",
        "value",
        "share",
        "project hours",
        "budget",
        "apportioned",
    ):
        table.add_column(column)

    for row in rows:
        table.add_row(
            row["client_name"],
            row["project_name"],
            row["user_name"],
            format_hours(row["hours"]),
            format_money(row["value"]),
            format_percent(row["share"]),
            format_hours(row["project_hours"]),
            format_money(row["budget"]),
            format_money(row["apportioned_budget"]),
        )

    console = Console()
    console.print(table)
