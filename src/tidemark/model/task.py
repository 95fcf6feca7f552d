# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Literal, Optional, TypedDict

import pendulum

from tidemark.model.entity_id import EntityId

TaskStatus = Literal["todo", "in_progress", "review", "done"]
Priority = Literal["critical", "high", "medium", "low"]
Impact = Literal["high", "medium", "low"]


class Task(TypedDict):
    id: EntityId
    entity_type: str
    external_id: Optional[str]
    title: str
    project_id: EntityId
    client_id: EntityId  # Always the project's client when the project is known
    developer_id: Optional[EntityId]
    developer_name: Optional[str]  # Denormalized from the user table
    collaborator_ids: list[EntityId]
    collaborator_names: list[str]
    status: TaskStatus
    progress: Decimal  # 0..100
    estimated_hours: Decimal
    planned_start: Optional[pendulum.Date]
    planned_delivery: Optional[pendulum.Date]
    actual_start: Optional[pendulum.Date]
    actual_delivery: Optional[pendulum.Date]
    priority: Optional[Priority]
    impact: Optional[Impact]
    risks: str
    notes: str
    in_testing: bool
