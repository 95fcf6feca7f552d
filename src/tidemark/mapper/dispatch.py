# SPDX-License-Identifier: MIT

from typing import Any, Callable

from tidemark.error import MalformedRecordError, UnknownEntityKindError
from tidemark.mapper.client import extract_client_id, map_client
from tidemark.mapper.normalize import RawRow
from tidemark.mapper.project import extract_project_id, map_project
from tidemark.mapper.project_membership import (
    extract_project_membership_id,
    map_project_membership,
)
from tidemark.mapper.reference import NULL_RESOLVER, ReferenceResolver
from tidemark.mapper.task import extract_task_id, map_task
from tidemark.mapper.timesheet_entry import (
    extract_timesheet_entry_id,
    map_timesheet_entry,
)
from tidemark.mapper.user import extract_user_id, map_user
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType

MAPPERS: dict[str, Callable[[RawRow, ReferenceResolver], Any]] = {
    EntityType.CLIENT: map_client,
    EntityType.PROJECT: map_project,
    EntityType.TASK: map_task,
    EntityType.USER: map_user,
    EntityType.TIMESHEET_ENTRY: map_timesheet_entry,
    EntityType.PROJECT_MEMBERSHIP: map_project_membership,
}

ID_EXTRACTORS: dict[str, Callable[[RawRow], EntityId]] = {
    EntityType.CLIENT: extract_client_id,
    EntityType.PROJECT: extract_project_id,
    EntityType.TASK: extract_task_id,
    EntityType.USER: extract_user_id,
    EntityType.TIMESHEET_ENTRY: extract_timesheet_entry_id,
    EntityType.PROJECT_MEMBERSHIP: extract_project_membership_id,
}


def map_record(
    kind: str, raw: Any, resolver: ReferenceResolver = NULL_RESOLVER
) -> Any:
    if kind not in MAPPERS:
        raise UnknownEntityKindError(kind)
    if not isinstance(raw, dict):
        raise MalformedRecordError(kind, "row is not a mapping", raw)
    return MAPPERS[kind](raw, resolver)


def extract_id(kind: str, raw: Any) -> EntityId:
    if kind not in ID_EXTRACTORS:
        raise UnknownEntityKindError(kind)
    if not isinstance(raw, dict):
        raise MalformedRecordError(kind, "row is not a mapping", raw)
    return ID_EXTRACTORS[kind](raw)
