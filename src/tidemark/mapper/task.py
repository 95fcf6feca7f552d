# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from decimal import Decimal
from typing import Optional

from tidemark.error import MalformedRecordError
from tidemark.mapper.normalize import (
    RawRow,
    bool_from_raw,
    clamp_percentage,
    date_from_raw,
    decimal_from_raw,
    id_from_raw_optional,
    id_list_from_raw,
    lower_keys,
    normalize_impact,
    normalize_priority,
    normalize_task_status,
    pick,
    text_from_raw,
    text_from_raw_optional,
)
from tidemark.mapper.reference import NULL_RESOLVER, ReferenceResolver
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.task import Task
from tidemark.template.task import UNTITLED_TASK, get_task_template

logger = logging.getLogger(__name__)

TASK_ID_FIELDS = ("id_tarefa_novo", "id")


def extract_task_id(raw: RawRow) -> EntityId:
    task_id = id_from_raw_optional(pick(lower_keys(raw), *TASK_ID_FIELDS))
    if task_id is None:
        raise MalformedRecordError(EntityType.TASK, "missing primary id", raw)
    return task_id


def map_task(raw: RawRow, resolver: ReferenceResolver = NULL_RESOLVER) -> Task:
    row = lower_keys(raw)
    task = get_task_template(extract_task_id(raw))

    project_id = id_from_raw_optional(pick(row, "ID_Projeto", "project_id", "projectId"))
    if project_id is None:
        raise MalformedRecordError(EntityType.TASK, "missing project id", raw)
    task["project_id"] = project_id
    task["client_id"] = __derive_client_id(task["id"], project_id, row, raw, resolver)

    task["external_id"] = text_from_raw_optional(
        pick(row, "ID_Tarefa", "external_id", "externalId")
    )
    task["title"] = text_from_raw(pick(row, "Afazer", "title"), default=UNTITLED_TASK)

    developer_id = id_from_raw_optional(
        pick(row, "ID_Colaborador", "developer_id", "developerId")
    )
    task["developer_id"] = developer_id
    task["collaborator_ids"] = [
        collaborator_id
        for collaborator_id in id_list_from_raw(
            pick(row, "collaborator_ids", "collaboratorIds", "colaboradores")
        )
        if collaborator_id != developer_id
    ]
    __resolve_names(task, resolver)

    task["status"] = normalize_task_status(pick(row, "StatusTarefa", "status"))
    task["progress"] = clamp_percentage(
        decimal_from_raw(pick(row, "Porcentagem", "progress"))
    )
    task["estimated_hours"] = max(
        decimal_from_raw(
            pick(row, "horas_estimadas", "estimated_hours", "estimatedHours")
        ),
        Decimal(0),
    )

    task["planned_start"] = date_from_raw(
        pick(row, "inicio_previsto", "scheduled_start", "scheduledStart")
    )
    task["planned_delivery"] = date_from_raw(
        pick(row, "entrega_estimada", "estimated_delivery", "estimatedDelivery")
    )
    task["actual_start"] = date_from_raw(
        pick(row, "inicio_real", "actual_start", "actualStart")
    )
    task["actual_delivery"] = date_from_raw(
        pick(row, "entrega_real", "actual_delivery", "actualDelivery")
    )

    task["priority"] = normalize_priority(pick(row, "Prioridade", "priority"))
    task["impact"] = normalize_impact(pick(row, "Impacto", "impact"))
    task["risks"] = text_from_raw(pick(row, "Riscos", "risks"))
    task["notes"] = text_from_raw(pick(row, "Observações", "observacoes", "notes"))
    task["in_testing"] = bool_from_raw(
        pick(row, "em_testes", "in_testing", "isInternalTesting"), default=False
    )
    return task


def refresh_task_names(task: Task, resolver: ReferenceResolver) -> Task:
    """Copy of the task with developer and collaborator names re-read."""
    refreshed = deepcopy(task)
    __resolve_names(refreshed, resolver)
    return refreshed


def __derive_client_id(
    task_id: EntityId,
    project_id: EntityId,
    row: RawRow,
    raw: RawRow,
    resolver: ReferenceResolver,
) -> EntityId:
    raw_client_id = id_from_raw_optional(pick(row, "ID_Cliente", "client_id", "clientId"))
    project_client_id = resolver.project_client_id(project_id)

    if project_client_id:
        if raw_client_id is not None and raw_client_id != project_client_id:
            logger.warning(
                "Task %s carries client %s but project %s belongs to client %s; "
                "using the project's client",
                task_id,
                raw_client_id,
                project_id,
                project_client_id,
            )
        return project_client_id
    if raw_client_id is None:
        raise MalformedRecordError(EntityType.TASK, "missing client id", raw)
    return raw_client_id


def __resolve_names(task: Task, resolver: ReferenceResolver) -> None:
    task["developer_name"] = __user_name(task["developer_id"], resolver)
    task["collaborator_names"] = [
        resolver.user_name(collaborator_id) or collaborator_id
        for collaborator_id in task["collaborator_ids"]
    ]


def __user_name(user_id: Optional[EntityId], resolver: ReferenceResolver) -> Optional[str]:
    if user_id is None:
        return None
    # Placeholder until the user row arrives
    return resolver.user_name(user_id) or user_id
