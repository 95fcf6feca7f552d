# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Optional

from tidemark.model.entity_id import EntityId
from tidemark.model.rollup import (
    ClientRollup,
    CollaboratorRollup,
    ProjectRollup,
    ReportRow,
    Rollup,
    RollupFilter,
)
from tidemark.model.snapshot import StoreSnapshot
from tidemark.model.timesheet_entry import TimesheetEntry

ZERO = Decimal(0)
HUNDRED = Decimal(100)


def entry_matches(entry: TimesheetEntry, rollup_filter: RollupFilter) -> bool:
    """Date range is inclusive; an entry without a date never matches."""
    if entry["date"] is None:
        return False
    if not rollup_filter["start_date"] <= entry["date"] <= rollup_filter["end_date"]:
        return False
    for field, key in (
        ("client_id", "client_ids"),
        ("project_id", "project_ids"),
        ("user_id", "collaborator_ids"),
    ):
        wanted = rollup_filter.get(key)
        # An empty list is the same as no restriction
        if wanted and entry[field] not in wanted:  # type: ignore[literal-required]
            return False
    return True


def compute_rollup(snapshot: StoreSnapshot, rollup_filter: RollupFilter) -> Rollup:
    """Aggregate matching timesheet hours and value into client, project and
    collaborator lines.

    Every entry is attributed through its own foreign keys, so hours on a
    deleted task still count. Parent totals are sums of their children.
    """
    clients: dict[EntityId, ClientRollup] = {}
    projects: dict[tuple[EntityId, EntityId], ProjectRollup] = {}
    collaborators: dict[tuple[EntityId, EntityId, EntityId], CollaboratorRollup] = {}
    entry_count = 0

    for entry in snapshot.timesheet_entries:
        if not entry_matches(entry, rollup_filter):
            continue
        entry_count += 1

        client_key = entry["client_id"]
        if client_key not in clients:
            client = snapshot.client(client_key)
            clients[client_key] = {
                "client_id": client_key,
                "client_name": client["name"] if client and client["name"] else client_key,
                "hours": ZERO,
                "value": ZERO,
                "projects": [],
            }

        project_key = (client_key, entry["project_id"])
        if project_key not in projects:
            project = snapshot.project(entry["project_id"])
            projects[project_key] = {
                "project_id": entry["project_id"],
                "project_name": (
                    project["name"] if project and project["name"] else entry["project_id"]
                ),
                "hours": ZERO,
                "value": ZERO,
                "budget": project["budget"] if project else None,
                "effective_hourly_rate": None,
                "collaborators": [],
            }
            clients[client_key]["projects"].append(projects[project_key])

        collaborator_key = (client_key, entry["project_id"], entry["user_id"])
        if collaborator_key not in collaborators:
            user = snapshot.user(entry["user_id"])
            if user is not None:
                user_name = user["name"] or entry["user_id"]
            else:
                user_name = entry["user_name"] or entry["user_id"]
            collaborators[collaborator_key] = {
                "user_id": entry["user_id"],
                "user_name": user_name,
                "hours": ZERO,
                "value": ZERO,
                "share": ZERO,
                "hourly_cost": user["hourly_cost"] if user else None,
                "cost_resolved": user is not None,
                "apportioned_budget": None,
            }
            projects[project_key]["collaborators"].append(
                collaborators[collaborator_key]
            )

        line = collaborators[collaborator_key]
        line["hours"] += entry["hours"]
        if line["hourly_cost"] is not None:
            line["value"] += entry["hours"] * line["hourly_cost"]

    for project_line in projects.values():
        __close_project(project_line)
    for client_line in clients.values():
        client_line["hours"] = sum((p["hours"] for p in client_line["projects"]), ZERO)
        client_line["value"] = sum((p["value"] for p in client_line["projects"]), ZERO)
        client_line["projects"].sort(key=lambda p: (p["project_name"].lower(), p["project_id"]))

    client_lines = sorted(
        clients.values(), key=lambda c: (c["client_name"].lower(), c["client_id"])
    )
    return {
        "filter": rollup_filter,
        "generation": snapshot.generation,
        "entry_count": entry_count,
        "hours": sum((c["hours"] for c in client_lines), ZERO),
        "value": sum((c["value"] for c in client_lines), ZERO),
        "unresolved_hours": sum(
            (line["hours"] for line in collaborators.values() if not line["cost_resolved"]),
            ZERO,
        ),
        "clients": client_lines,
    }


def __close_project(project_line: ProjectRollup) -> None:
    lines = project_line["collaborators"]
    hours = sum((line["hours"] for line in lines), ZERO)
    project_line["hours"] = hours
    project_line["value"] = sum((line["value"] for line in lines), ZERO)

    rate: Optional[Decimal] = None
    if hours > 0 and project_line["budget"] is not None:
        rate = project_line["budget"] / hours
    project_line["effective_hourly_rate"] = rate

    for line in lines:
        line["share"] = line["hours"] / hours * HUNDRED if hours > 0 else ZERO
        line["apportioned_budget"] = line["hours"] * rate if rate is not None else None
    lines.sort(key=lambda line: (-line["hours"], line["user_name"].lower()))


def report_rows(rollup: Rollup) -> list[ReportRow]:
    """Flatten a rollup into one row per collaborator line."""
    rows: list[ReportRow] = []
    for client_line in rollup["clients"]:
        for project_line in client_line["projects"]:
            for line in project_line["collaborators"]:
                rows.append(
                    {
                        "client_id": client_line["client_id"],
                        "client_name": client_line["client_name"],
                        "project_id": project_line["project_id"],
                        "project_name": project_line["project_name"],
                        "user_id": line["user_id"],
                        "user_name": line["user_name"],
                        "hours": line["hours"],
                        "value": line["value"],
                        "share": line["share"],
                        "budget": project_line["budget"],
                        "project_hours": project_line["hours"],
                        "effective_hourly_rate": project_line["effective_hourly_rate"],
                        "apportioned_budget": line["apportioned_budget"],
                    }
                )
    return rows
