# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Iterable, Optional

import pendulum

from tidemark import time
from tidemark.model.task import Task

ZERO = Decimal(0)
HUNDRED = Decimal(100)


def weighted_progress(tasks: Iterable[Task]) -> Decimal:
    """Progress weighted by estimated hours.

    Tasks without an estimate do not weigh in; when no task has one, the
    plain mean of all progress values is used instead.
    """
    tasks = list(tasks)
    if not tasks:
        return ZERO

    weighted_sum = ZERO
    total_estimate = ZERO
    for task in tasks:
        if task["estimated_hours"] > 0:
            weighted_sum += task["progress"] * task["estimated_hours"]
            total_estimate += task["estimated_hours"]

    if total_estimate > 0:
        return weighted_sum / total_estimate
    return sum((task["progress"] for task in tasks), ZERO) / len(tasks)


def mean_progress(tasks: Iterable[Task]) -> Decimal:
    tasks = list(tasks)
    if not tasks:
        return ZERO
    return sum((task["progress"] for task in tasks), ZERO) / len(tasks)


def planned_progress(
    start: Optional[pendulum.Date],
    end: Optional[pendulum.Date],
    today: pendulum.Date,
) -> Optional[Decimal]:
    """Share of the planned calendar elapsed by today, or None without a plan."""
    if start is None or end is None or not start < end:
        return None
    if today <= start:
        return ZERO
    if today >= end:
        return HUNDRED
    elapsed = time.days_between(start, today)
    total = time.days_between(start, end)
    return Decimal(elapsed) / Decimal(total) * HUNDRED


def days_overdue(task: Task, today: pendulum.Date) -> int:
    if task["planned_delivery"] is None or task["status"] == "review":
        return 0
    if task["status"] == "done":
        if task["actual_delivery"] is None:
            return 0
        return time.days_between(task["planned_delivery"], task["actual_delivery"])
    return time.days_between(task["planned_delivery"], today)


def is_delayed(task: Task, today: pendulum.Date) -> bool:
    return task["status"] != "done" and days_overdue(task, today) > 0
