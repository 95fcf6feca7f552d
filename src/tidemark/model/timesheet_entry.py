# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Optional, TypedDict

import pendulum

from tidemark.model.entity_id import EntityId


class TimesheetEntry(TypedDict):
    id: EntityId
    entity_type: str
    # Denormalized foreign keys; authoritative even when the task is gone
    user_id: EntityId
    task_id: EntityId
    project_id: EntityId
    client_id: EntityId
    user_name: str
    date: Optional[pendulum.Date]
    start_time: Optional[str]  # HH:mm
    end_time: Optional[str]  # HH:mm
    hours: Decimal
    lunch_deduction: bool
    description: str
