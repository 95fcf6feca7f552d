# SPDX-License-Identifier: MIT

from tidemark.model.client import Client
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType


def get_client_template(id: EntityId) -> Client:
    return {
        "id": id,
        "entity_type": EntityType.CLIENT,
        "name": "",
        "logo_url": "",
        "active": True,
        "client_type": "final",
        "partner_id": None,
    }
