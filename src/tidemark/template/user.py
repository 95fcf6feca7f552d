# SPDX-License-Identifier: MIT

from decimal import Decimal

from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.user import User


def get_user_template(id: EntityId) -> User:
    return {
        "id": id,
        "entity_type": EntityType.USER,
        "name": "",
        "email": "",
        "role": "developer",
        "job_title": "",
        "tower": "",
        "active": True,
        "hourly_cost": Decimal(0),
        "daily_available_hours": Decimal(0),
        "monthly_available_hours": Decimal(0),
    }
