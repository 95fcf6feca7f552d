# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

from tidemark.model.entity_id import EntityId

ClientType = Literal["final", "partner"]


class Client(TypedDict):
    id: EntityId
    entity_type: str
    name: str
    logo_url: str
    active: bool
    client_type: ClientType
    partner_id: Optional[EntityId]  # Only on final clients
