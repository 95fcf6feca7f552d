# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Optional, TypedDict

from tidemark.model.entity_id import EntityId


class ProjectPerformance(TypedDict):
    project_id: EntityId
    project_name: str
    client_id: EntityId
    status: str
    hours_logged: Decimal
    committed_cost: Decimal
    estimated_hours: Decimal
    progress: Decimal  # Weighted by estimated hours
    planned_progress: Optional[Decimal]
    cost_to_finish: Decimal
    sold_value: Decimal
    result: Decimal  # Sold value minus committed cost
    margin: Decimal  # Percent of sold value; 0 when nothing was sold
    delayed_tasks: int


class PortfolioSummary(TypedDict):
    project_count: int
    active_project_count: int
    sold_value: Decimal
    committed_cost: Decimal
    cost_to_finish: Decimal
    estimated_result: Decimal  # Sold value minus committed and forecast cost
    global_progress: Decimal  # Mean of project progress
    delayed_task_count: int
