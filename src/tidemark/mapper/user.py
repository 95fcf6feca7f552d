# SPDX-License-Identifier: MIT

from decimal import Decimal

from tidemark.error import MalformedRecordError
from tidemark.mapper.normalize import (
    RawRow,
    bool_from_raw,
    decimal_from_raw,
    fold,
    id_from_raw_optional,
    lower_keys,
    pick,
    text_from_raw,
)
from tidemark.mapper.reference import NULL_RESOLVER, ReferenceResolver
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.user import User
from tidemark.template.user import get_user_template

USER_ID_FIELDS = ("ID_Colaborador", "id")
ADMIN_ROLES = ("admin", "administrador", "administrator")


def extract_user_id(raw: RawRow) -> EntityId:
    user_id = id_from_raw_optional(pick(lower_keys(raw), *USER_ID_FIELDS))
    if user_id is None:
        raise MalformedRecordError(EntityType.USER, "missing primary id", raw)
    return user_id


def map_user(raw: RawRow, resolver: ReferenceResolver = NULL_RESOLVER) -> User:
    row = lower_keys(raw)
    user = get_user_template(extract_user_id(raw))

    user["name"] = text_from_raw(pick(row, "NomeColaborador", "name", "nome"))
    user["email"] = text_from_raw(pick(row, "E-mail", "email"))
    role = fold(text_from_raw(pick(row, "papel", "role")))
    user["role"] = "admin" if role in ADMIN_ROLES else "developer"
    user["job_title"] = text_from_raw(pick(row, "Cargo", "job_title", "jobTitle"))
    user["tower"] = text_from_raw(pick(row, "torre", "tower"))
    user["active"] = bool_from_raw(pick(row, "ativo", "active"), default=True)

    user["hourly_cost"] = max(
        decimal_from_raw(pick(row, "custo_hora", "hourly_cost", "hourlyCost")),
        Decimal(0),
    )
    user["daily_available_hours"] = max(
        decimal_from_raw(
            pick(row, "horas_disponiveis_dia", "daily_available_hours", "dailyAvailableHours")
        ),
        Decimal(0),
    )
    user["monthly_available_hours"] = max(
        decimal_from_raw(
            pick(
                row,
                "horas_disponiveis_mes",
                "monthly_available_hours",
                "monthlyAvailableHours",
            )
        ),
        Decimal(0),
    )
    return user
