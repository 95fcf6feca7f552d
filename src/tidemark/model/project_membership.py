# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Optional, TypedDict

from tidemark.model.entity_id import EntityId


class ProjectMembership(TypedDict):
    id: EntityId
    entity_type: str
    project_id: EntityId
    user_id: EntityId
    allocation_percentage: Optional[Decimal]
