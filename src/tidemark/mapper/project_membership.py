# SPDX-License-Identifier: MIT

from tidemark.error import MalformedRecordError
from tidemark.mapper.normalize import (
    RawRow,
    clamp_percentage,
    decimal_from_raw_optional,
    id_from_raw_optional,
    lower_keys,
    pick,
)
from tidemark.mapper.reference import NULL_RESOLVER, ReferenceResolver
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.project_membership import ProjectMembership
from tidemark.template.project_membership import get_project_membership_template

PROJECT_FIELDS = ("id_projeto", "project_id", "projectId")
USER_FIELDS = ("id_colaborador", "user_id", "userId")


def membership_id(project_id: EntityId, user_id: EntityId) -> EntityId:
    return f"{project_id}:{user_id}"


def extract_project_membership_id(raw: RawRow) -> EntityId:
    row = lower_keys(raw)
    raw_id = id_from_raw_optional(pick(row, "id"))
    if raw_id is not None:
        return raw_id
    project_id = id_from_raw_optional(pick(row, *PROJECT_FIELDS))
    user_id = id_from_raw_optional(pick(row, *USER_FIELDS))
    if project_id is None or user_id is None:
        raise MalformedRecordError(
            EntityType.PROJECT_MEMBERSHIP, "missing id and project/user pair", raw
        )
    return membership_id(project_id, user_id)


def map_project_membership(
    raw: RawRow, resolver: ReferenceResolver = NULL_RESOLVER
) -> ProjectMembership:
    row = lower_keys(raw)
    project_id = id_from_raw_optional(pick(row, *PROJECT_FIELDS))
    if project_id is None:
        raise MalformedRecordError(EntityType.PROJECT_MEMBERSHIP, "missing project id", raw)
    user_id = id_from_raw_optional(pick(row, *USER_FIELDS))
    if user_id is None:
        raise MalformedRecordError(EntityType.PROJECT_MEMBERSHIP, "missing user id", raw)

    membership = get_project_membership_template(extract_project_membership_id(raw))
    membership["project_id"] = project_id
    membership["user_id"] = user_id

    allocation = decimal_from_raw_optional(
        pick(row, "allocation_percentage", "allocationPercentage", "alocacao")
    )
    membership["allocation_percentage"] = (
        clamp_percentage(allocation) if allocation is not None else None
    )
    return membership
