# SPDX-License-Identifier: MIT

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

import pendulum

from tidemark import time
from tidemark.model.capacity import ResourceLoad, UserAvailability
from tidemark.model.entity_id import EntityId
from tidemark.model.snapshot import StoreSnapshot
from tidemark.model.task import Task
from tidemark.model.user import User

ZERO = Decimal(0)
HUNDRED = Decimal(100)
DEFAULT_MONTHLY_CAPACITY = Decimal(160)


def monthly_allocated_hours(
    user_id: EntityId,
    month: str,
    tasks: Iterable[Task],
    today: pendulum.Date,
) -> Decimal:
    """Planned hours of the user's open tasks that fall in the month.

    A task's estimate is split evenly across its assignees and spread over
    its planned days; a task without dates occupies a single day.
    """
    month_start, month_end = time.month_boundaries(month)
    allocated = ZERO

    for task in tasks:
        if task["status"] == "done" or task["estimated_hours"] <= 0:
            continue
        if task["developer_id"] != user_id and user_id not in task["collaborator_ids"]:
            continue

        task_start = task["planned_start"] or task["actual_start"] or today
        task_end = max(task["planned_delivery"] or task_start, task_start)
        overlap_start = max(task_start, month_start)
        overlap_end = min(task_end, month_end)
        if overlap_start > overlap_end:
            continue

        task_days = time.days_between(task_start, task_end) + 1
        overlap_days = time.days_between(overlap_start, overlap_end) + 1
        assignees = 1 + len(task["collaborator_ids"])
        allocated += (
            Decimal(overlap_days) / Decimal(task_days) * task["estimated_hours"] / assignees
        )

    return allocated.quantize(Decimal(1), rounding=ROUND_HALF_UP)


def user_capacity(user: User, default_capacity: Decimal) -> Decimal:
    if user["monthly_available_hours"] > 0:
        return user["monthly_available_hours"]
    return default_capacity


def user_monthly_availability(
    user: User,
    month: str,
    tasks: Iterable[Task],
    today: pendulum.Date,
    default_capacity: Decimal = DEFAULT_MONTHLY_CAPACITY,
) -> UserAvailability:
    capacity = user_capacity(user, default_capacity)
    allocated = monthly_allocated_hours(user["id"], month, tasks, today)
    return {
        "user_id": user["id"],
        "month": month,
        "capacity": capacity,
        "allocated": allocated,
        "available": capacity - allocated,
    }


def resource_load(
    snapshot: StoreSnapshot,
    month: str,
    default_capacity: Decimal = DEFAULT_MONTHLY_CAPACITY,
) -> list[ResourceLoad]:
    """Hours logged by each active user in the month against their capacity."""
    month_start, month_end = time.month_boundaries(month)
    logged: dict[EntityId, Decimal] = {}
    for entry in snapshot.timesheet_entries:
        if entry["date"] is None or not month_start <= entry["date"] <= month_end:
            continue
        logged[entry["user_id"]] = logged.get(entry["user_id"], ZERO) + entry["hours"]

    loads: list[ResourceLoad] = []
    for user in snapshot.users:
        if not user["active"]:
            continue
        capacity = user_capacity(user, default_capacity)
        user_logged = logged.get(user["id"], ZERO)
        loads.append(
            {
                "user_id": user["id"],
                "user_name": user["name"] or user["id"],
                "tower": user["tower"],
                "capacity": capacity,
                "logged": user_logged,
                "load": user_logged / capacity * HUNDRED if capacity > 0 else ZERO,
            }
        )
    loads.sort(key=lambda load: load["load"], reverse=True)
    return loads
