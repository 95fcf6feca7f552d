# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Literal, Optional, TypedDict

import pendulum

from tidemark.model.entity_id import EntityId

ProjectStatus = Literal["planning", "in_progress", "paused", "done", "cancelled"]


class Project(TypedDict):
    id: EntityId
    entity_type: str
    name: str
    client_id: EntityId
    partner_id: Optional[EntityId]
    status: ProjectStatus
    planned_start: Optional[pendulum.Date]
    planned_end: Optional[pendulum.Date]
    # Actual dates may fall after the planned ones; delay is tracked, not rejected
    actual_start: Optional[pendulum.Date]
    actual_end: Optional[pendulum.Date]
    budget: Decimal
    sold_value: Decimal
    risks: str
    success_factor: str
    report: str
    description: str
    manager: str
    active: bool
