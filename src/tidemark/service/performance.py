# SPDX-License-Identifier: MIT

import logging
from decimal import Decimal
from typing import Iterable, Optional

import pendulum

from tidemark.model.entity_id import EntityId
from tidemark.model.performance import PortfolioSummary, ProjectPerformance
from tidemark.model.snapshot import StoreSnapshot
from tidemark.service.progress import is_delayed, planned_progress, weighted_progress

logger = logging.getLogger(__name__)

ZERO = Decimal(0)
HUNDRED = Decimal(100)


def project_performance(
    snapshot: StoreSnapshot,
    project_id: EntityId,
    today: pendulum.Date,
    fallback_hourly_rate: Decimal = Decimal(150),
) -> Optional[ProjectPerformance]:
    project = snapshot.project(project_id)
    if project is None:
        logger.debug("Project %s not in snapshot", project_id)
        return None

    tasks = [task for task in snapshot.tasks if task["project_id"] == project_id]
    entries = [
        entry for entry in snapshot.timesheet_entries if entry["project_id"] == project_id
    ]

    hours_logged = ZERO
    committed_cost = ZERO
    for entry in entries:
        hours_logged += entry["hours"]
        user = snapshot.user(entry["user_id"])
        if user is not None:
            committed_cost += entry["hours"] * user["hourly_cost"]

    cost_to_finish = ZERO
    for task in tasks:
        remaining_hours = task["estimated_hours"] * (1 - task["progress"] / HUNDRED)
        developer = (
            snapshot.user(task["developer_id"]) if task["developer_id"] else None
        )
        rate = developer["hourly_cost"] if developer else ZERO
        if rate <= 0:
            rate = fallback_hourly_rate
        cost_to_finish += remaining_hours * rate

    sold_value = project["sold_value"]
    result = sold_value - committed_cost
    return {
        "project_id": project_id,
        "project_name": project["name"] or project_id,
        "client_id": project["client_id"],
        "status": project["status"],
        "hours_logged": hours_logged,
        "committed_cost": committed_cost,
        "estimated_hours": sum((task["estimated_hours"] for task in tasks), ZERO),
        "progress": weighted_progress(tasks),
        "planned_progress": planned_progress(
            project["planned_start"], project["planned_end"], today
        ),
        "cost_to_finish": cost_to_finish,
        "sold_value": sold_value,
        "result": result,
        "margin": result / sold_value * HUNDRED if sold_value > 0 else ZERO,
        "delayed_tasks": sum(1 for task in tasks if is_delayed(task, today)),
    }


def portfolio_summary(
    snapshot: StoreSnapshot,
    project_ids: Optional[Iterable[EntityId]],
    today: pendulum.Date,
    fallback_hourly_rate: Decimal = Decimal(150),
) -> PortfolioSummary:
    """Totals over the given projects, or every project when None."""
    if project_ids is None:
        project_ids = [project["id"] for project in snapshot.projects]

    performances = [
        performance
        for performance in (
            project_performance(snapshot, project_id, today, fallback_hourly_rate)
            for project_id in dict.fromkeys(project_ids)
        )
        if performance is not None
    ]

    sold_value = sum((p["sold_value"] for p in performances), ZERO)
    committed_cost = sum((p["committed_cost"] for p in performances), ZERO)
    cost_to_finish = sum((p["cost_to_finish"] for p in performances), ZERO)
    global_progress = (
        sum((p["progress"] for p in performances), ZERO) / len(performances)
        if performances
        else ZERO
    )
    return {
        "project_count": len(performances),
        "active_project_count": sum(1 for p in performances if p["status"] != "done"),
        "sold_value": sold_value,
        "committed_cost": committed_cost,
        "cost_to_finish": cost_to_finish,
        "estimated_result": sold_value - (committed_cost + cost_to_finish),
        "global_progress": global_progress,
        "delayed_task_count": sum(p["delayed_tasks"] for p in performances),
    }
