# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from tidemark.model.capacity import ResourceLoad, UserAvailability
from tidemark.model.entity_id import EntityId
from tidemark.view.view.util import format_hours, format_percent, load_style
from tidemark.view.view.views.header import header


def capacity_report(
    month: str,
    loads: list[ResourceLoad],
    availability: dict[EntityId, UserAvailability],
) -> None:
    header("capacity", month)

    table = Table(box=box.SIMPLE)
    table.add_column("collaborator")
    table.add_column("tower")
    table.add_column("capacity", justify="right")
    table.add_column("logged", justify="right")
    table.add_column("load", justify="right")
    table.add_column("planned", justify="right")
    table.add_column("available", justify="right")

    for load in loads:
        user_availability = availability.get(load["user_id"])
        style = load_style(load["load"])
        table.add_row(
            load["user_name"],
            load["tower"],
            format_hours(load["capacity"]),
            format_hours(load["logged"]),
            f"[{style}]{format_percent(load['load'])}[/{style}]",
            format_hours(user_availability["allocated"]) if user_availability else "-",
            format_hours(user_availability["available"]) if user_availability else "-",
        )

    console = Console()
    console.print(table)
