# SPDX-License-Identifier: MIT

from decimal import Decimal

from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.project import Project


def get_project_template(id: EntityId) -> Project:
    return {
        "id": id,
        "entity_type": EntityType.PROJECT,
        "name": "",
        "client_id": "",
        "partner_id": None,
        "status": "in_progress",
        "planned_start": None,
        "planned_end": None,
        "actual_start": None,
        "actual_end": None,
        "budget": Decimal(0),
        "sold_value": Decimal(0),
        "risks": "",
        "success_factor": "",
        "report": "",
        "description": "",
        "manager": "",
        "active": True,
    }
