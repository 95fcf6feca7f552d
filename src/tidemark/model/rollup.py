# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import NotRequired, Optional, TypedDict

import pendulum

from tidemark.model.entity_id import EntityId


class RollupFilter(TypedDict):
    start_date: pendulum.Date
    end_date: pendulum.Date
    client_ids: NotRequired[Optional[list[EntityId]]]
    project_ids: NotRequired[Optional[list[EntityId]]]
    collaborator_ids: NotRequired[Optional[list[EntityId]]]


class CollaboratorRollup(TypedDict):
    user_id: EntityId
    user_name: str
    hours: Decimal
    value: Decimal
    share: Decimal  # Percent of the project's hours
    hourly_cost: Optional[Decimal]
    cost_resolved: bool  # False when the user is unknown and value is a placeholder 0
    apportioned_budget: Optional[Decimal]


class ProjectRollup(TypedDict):
    project_id: EntityId
    project_name: str
    hours: Decimal
    value: Decimal
    budget: Optional[Decimal]  # None when the project is unresolved
    effective_hourly_rate: Optional[Decimal]  # None when hours is 0
    collaborators: list[CollaboratorRollup]


class ClientRollup(TypedDict):
    client_id: EntityId
    client_name: str
    hours: Decimal
    value: Decimal
    projects: list[ProjectRollup]


class Rollup(TypedDict):
    filter: RollupFilter
    generation: int
    entry_count: int
    hours: Decimal
    value: Decimal
    unresolved_hours: Decimal  # Hours logged by users missing from the store
    clients: list[ClientRollup]


class ReportRow(TypedDict):
    client_id: EntityId
    client_name: str
    project_id: EntityId
    project_name: str
    user_id: EntityId
    user_name: str
    hours: Decimal
    value: Decimal
    share: Decimal
    budget: Optional[Decimal]
    project_hours: Decimal
    effective_hourly_rate: Optional[Decimal]
    apportioned_budget: Optional[Decimal]
