# SPDX-License-Identifier: MIT

import logging

from tidemark.error import MalformedRecordError
from tidemark.mapper.normalize import (
    RawRow,
    bool_from_raw,
    date_from_raw,
    decimal_from_raw,
    id_from_raw_optional,
    lower_keys,
    normalize_project_status,
    pick,
    text_from_raw,
)
from tidemark.mapper.reference import NULL_RESOLVER, ReferenceResolver
from tidemark.model.entity_id import EntityId, entity_id_from_raw
from tidemark.model.entity_type import EntityType
from tidemark.model.project import Project
from tidemark.template.project import get_project_template

logger = logging.getLogger(__name__)

PROJECT_ID_FIELDS = ("ID_Projeto", "id")


def extract_project_id(raw: RawRow) -> EntityId:
    project_id = id_from_raw_optional(pick(lower_keys(raw), *PROJECT_ID_FIELDS))
    if project_id is None:
        raise MalformedRecordError(EntityType.PROJECT, "missing primary id", raw)
    return project_id


def map_project(raw: RawRow, resolver: ReferenceResolver = NULL_RESOLVER) -> Project:
    row = lower_keys(raw)
    project = get_project_template(extract_project_id(raw))

    project["name"] = text_from_raw(pick(row, "NomeProjeto", "projeto", "name"))
    project["client_id"] = entity_id_from_raw(
        pick(row, "ID_Cliente", "client_id", "clientId")
    )
    partner_id = id_from_raw_optional(pick(row, "partner_id", "partnerId"))
    if partner_id is not None and resolver.client_type(partner_id) == "final":
        logger.warning(
            "Project %s references %s as partner, which is a final client; dropped",
            project["id"],
            partner_id,
        )
        partner_id = None
    project["partner_id"] = partner_id
    project["status"] = normalize_project_status(
        pick(row, "StatusProjeto", "status")
    )
    project["planned_start"] = date_from_raw(
        pick(row, "startDate", "inicio_previsto", "planned_start")
    )
    project["planned_end"] = date_from_raw(
        pick(row, "estimatedDelivery", "entrega_estimada", "planned_end")
    )
    project["actual_start"] = date_from_raw(
        pick(row, "start_date_real", "startDateReal", "actual_start")
    )
    project["actual_end"] = date_from_raw(
        pick(row, "end_date_real", "endDateReal", "actual_end")
    )
    project["budget"] = max(decimal_from_raw(pick(row, "budget", "orcamento")), 0)
    project["sold_value"] = max(
        decimal_from_raw(pick(row, "valor_total_rs", "sold_value")), 0
    )
    project["risks"] = text_from_raw(pick(row, "risks", "riscos"))
    project["success_factor"] = text_from_raw(
        pick(row, "success_factor", "successFactor")
    )
    project["report"] = text_from_raw(pick(row, "weekly_report", "report"))
    project["description"] = text_from_raw(pick(row, "description", "Descricao"))
    project["manager"] = text_from_raw(
        pick(row, "manager_client", "managerClient", "manager")
    )
    project["active"] = bool_from_raw(pick(row, "ativo", "active"), default=True)
    return project
