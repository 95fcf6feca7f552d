# SPDX-License-Identifier: MIT

from decimal import Decimal

from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.task import Task

UNTITLED_TASK = "(untitled)"


def get_task_template(id: EntityId) -> Task:
    return {
        "id": id,
        "entity_type": EntityType.TASK,
        "external_id": None,
        "title": UNTITLED_TASK,
        "project_id": "",
        "client_id": "",
        "developer_id": None,
        "developer_name": None,
        "collaborator_ids": [],
        "collaborator_names": [],
        "status": "todo",
        "progress": Decimal(0),
        "estimated_hours": Decimal(0),
        "planned_start": None,
        "planned_delivery": None,
        "actual_start": None,
        "actual_delivery": None,
        "priority": None,
        "impact": None,
        "risks": "",
        "notes": "",
        "in_testing": False,
    }
