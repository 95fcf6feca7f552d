# SPDX-License-Identifier: MIT

import logging
from typing import Optional

from tidemark.error import MalformedRecordError
from tidemark.mapper.normalize import (
    RawRow,
    bool_from_raw,
    fold,
    id_from_raw_optional,
    lower_keys,
    pick,
    text_from_raw,
)
from tidemark.mapper.reference import NULL_RESOLVER, ReferenceResolver
from tidemark.model.client import Client, ClientType
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.template.client import get_client_template

logger = logging.getLogger(__name__)

CLIENT_ID_FIELDS = ("ID_Cliente", "id")
PARTNER_TYPES = ("parceiro", "partner")


def extract_client_id(raw: RawRow) -> EntityId:
    client_id = id_from_raw_optional(pick(lower_keys(raw), *CLIENT_ID_FIELDS))
    if client_id is None:
        raise MalformedRecordError(EntityType.CLIENT, "missing primary id", raw)
    return client_id


def map_client(raw: RawRow, resolver: ReferenceResolver = NULL_RESOLVER) -> Client:
    row = lower_keys(raw)
    client = get_client_template(extract_client_id(raw))

    client["name"] = text_from_raw(pick(row, "NomeCliente", "name", "nome"))
    client["logo_url"] = text_from_raw(
        pick(row, "NewLogo", "logo_url", "logoUrl", "logo")
    )
    client["active"] = bool_from_raw(pick(row, "ativo", "active"), default=True)

    client_type = fold(text_from_raw(pick(row, "tipo_cliente", "client_type")))
    if client_type in PARTNER_TYPES:
        client["client_type"] = "partner"
        return client

    partner_id = id_from_raw_optional(pick(row, "partner_id", "partnerId"))
    if partner_id == client["id"]:
        logger.warning("Client %s references itself as partner; dropped", partner_id)
        partner_id = None
    client["partner_id"] = partner_id
    if partner_id is not None:
        check_partner(client, resolver.client_type(partner_id))
    return client


def check_partner(client: Client, partner_type: Optional[ClientType]) -> Client:
    """Drop the client's partner reference when it points at a final client.

    An unknown partner (partner_type None) is kept until it loads.
    """
    partner_id = client["partner_id"]
    if partner_id is None:
        return client
    if partner_type == "final":
        logger.warning(
            "Client %s references %s as partner, which is a final client; dropped",
            client["id"],
            partner_id,
        )
        client["partner_id"] = None
    elif partner_type is None:
        logger.debug("Partner %s of client %s not loaded yet", partner_id, client["id"])
    return client
