# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import TypedDict

from tidemark.model.entity_id import EntityId


class UserAvailability(TypedDict):
    user_id: EntityId
    month: str  # YYYY-MM
    capacity: Decimal
    allocated: Decimal  # Planned task hours, whole hours
    available: Decimal  # May be negative when over-allocated


class ResourceLoad(TypedDict):
    user_id: EntityId
    user_name: str
    tower: str
    capacity: Decimal
    logged: Decimal
    load: Decimal  # Percent of capacity


class TaskTeamMember(TypedDict):
    user_id: EntityId
    user_name: str
    job_title: str
    is_responsible: bool
    allocation_percentage: Decimal
    limit: Decimal
    spent: Decimal
    remaining: Decimal
    usage: Decimal  # Percent of limit, capped at 100
