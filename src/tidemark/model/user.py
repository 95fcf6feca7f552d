# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Literal, TypedDict

from tidemark.model.entity_id import EntityId

UserRole = Literal["admin", "developer"]


class User(TypedDict):
    id: EntityId
    entity_type: str
    name: str
    email: str
    role: UserRole
    job_title: str
    tower: str
    active: bool
    hourly_cost: Decimal
    daily_available_hours: Decimal
    monthly_available_hours: Decimal
