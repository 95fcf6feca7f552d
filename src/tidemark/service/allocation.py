# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Optional

from tidemark.model.capacity import TaskTeamMember
from tidemark.model.entity_id import EntityId
from tidemark.model.snapshot import StoreSnapshot

ZERO = Decimal(0)
HUNDRED = Decimal(100)


def task_team_metrics(
    snapshot: StoreSnapshot, task_id: EntityId
) -> Optional[list[TaskTeamMember]]:
    """Hour budget per assignee of a task.

    Each assignee may spend their project allocation percentage of the
    task estimate.
    """
    task = snapshot.task(task_id)
    if task is None:
        return None

    member_ids = [task["developer_id"]] if task["developer_id"] else []
    member_ids = list(dict.fromkeys(member_ids + task["collaborator_ids"]))

    allocations = {
        membership["user_id"]: membership["allocation_percentage"] or ZERO
        for membership in snapshot.project_memberships
        if membership["project_id"] == task["project_id"]
    }

    metrics: list[TaskTeamMember] = []
    for user_id in member_ids:
        user = snapshot.user(user_id)
        allocation = allocations.get(user_id, ZERO)
        limit = allocation / HUNDRED * task["estimated_hours"]
        spent = sum(
            (
                entry["hours"]
                for entry in snapshot.timesheet_entries
                if entry["task_id"] == task_id and entry["user_id"] == user_id
            ),
            ZERO,
        )
        metrics.append(
            {
                "user_id": user_id,
                "user_name": user["name"] if user else "?",
                "job_title": user["job_title"] if user else "",
                "is_responsible": user_id == task["developer_id"],
                "allocation_percentage": allocation,
                "limit": limit,
                "spent": spent,
                "remaining": max(limit - spent, ZERO),
                "usage": min(HUNDRED, spent / limit * HUNDRED) if limit > 0 else ZERO,
            }
        )
    return metrics
