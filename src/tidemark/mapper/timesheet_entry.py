# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Optional

from tidemark import time
from tidemark.error import MalformedRecordError
from tidemark.mapper.normalize import (
    RawRow,
    bool_from_raw,
    clock_from_raw,
    date_from_raw,
    decimal_from_raw,
    id_from_raw_optional,
    lower_keys,
    pick,
    text_from_raw,
    text_from_raw_optional,
)
from tidemark.mapper.reference import NULL_RESOLVER, ReferenceResolver
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.timesheet_entry import TimesheetEntry
from tidemark.template.timesheet_entry import get_timesheet_entry_template

TIMESHEET_ENTRY_ID_FIELDS = ("ID_Horas_Trabalhadas", "id")
LUNCH_HOURS = Decimal(1)
MINUTES_PER_DAY = 24 * 60


def extract_timesheet_entry_id(raw: RawRow) -> EntityId:
    entry_id = id_from_raw_optional(pick(lower_keys(raw), *TIMESHEET_ENTRY_ID_FIELDS))
    if entry_id is None:
        raise MalformedRecordError(EntityType.TIMESHEET_ENTRY, "missing primary id", raw)
    return entry_id


def map_timesheet_entry(
    raw: RawRow, resolver: ReferenceResolver = NULL_RESOLVER
) -> TimesheetEntry:
    row = lower_keys(raw)
    entry = get_timesheet_entry_template(extract_timesheet_entry_id(raw))

    entry["user_id"] = __required_id(row, raw, "user id", "ID_Colaborador", "user_id", "userId")
    entry["project_id"] = __required_id(
        row, raw, "project id", "ID_Projeto", "project_id", "projectId"
    )
    entry["client_id"] = __required_id(
        row, raw, "client id", "ID_Cliente", "client_id", "clientId"
    )
    entry["task_id"] = __task_id(row, raw, resolver)
    entry["user_name"] = __user_name(entry["user_id"], row, resolver)

    entry["date"] = date_from_raw(pick(row, "Data", "date"))
    entry["start_time"] = clock_from_raw(pick(row, "Hora_Inicio", "start_time", "startTime"))
    entry["end_time"] = clock_from_raw(pick(row, "Hora_Fim", "end_time", "endTime"))
    entry["lunch_deduction"] = bool_from_raw(
        pick(row, "Almoco_Deduzido", "lunch_deduction", "lunchDeduction"), default=False
    )
    entry["description"] = text_from_raw(pick(row, "Descricao", "description"))

    hours = max(
        decimal_from_raw(pick(row, "Horas_Trabalhadas", "hours", "total_hours", "totalHours")),
        Decimal(0),
    )
    if hours == 0 and entry["start_time"] and entry["end_time"]:
        hours = hours_between_clock_times(
            entry["start_time"], entry["end_time"], entry["lunch_deduction"]
        )
    entry["hours"] = hours
    return entry


def hours_between_clock_times(start: str, end: str, lunch_deduction: bool) -> Decimal:
    """Hours from 'HH:mm' to 'HH:mm', wrapping past midnight."""
    minutes = time.minutes_from_clock_str(end) - time.minutes_from_clock_str(start)
    if minutes < 0:
        minutes += MINUTES_PER_DAY
    hours = Decimal(minutes) / Decimal(60)
    if lunch_deduction:
        hours -= LUNCH_HOURS
    return max(hours, Decimal(0))


def __required_id(row: RawRow, raw: RawRow, what: str, *names: str) -> EntityId:
    entity_id = id_from_raw_optional(pick(row, *names))
    if entity_id is None:
        raise MalformedRecordError(EntityType.TIMESHEET_ENTRY, f"missing {what}", raw)
    return entity_id


def __task_id(row: RawRow, raw: RawRow, resolver: ReferenceResolver) -> EntityId:
    task_id = id_from_raw_optional(pick(row, "id_tarefa_novo", "task_id", "taskId"))
    if task_id is not None:
        return task_id

    external_id = text_from_raw_optional(pick(row, "ID_Tarefa"))
    if external_id is None:
        raise MalformedRecordError(EntityType.TIMESHEET_ENTRY, "missing task id", raw)
    return resolver.task_id_for_external(external_id) or external_id


def __user_name(user_id: EntityId, row: RawRow, resolver: ReferenceResolver) -> str:
    joined = row.get("dim_colaboradores")
    if isinstance(joined, dict):
        name: Optional[str] = text_from_raw_optional(
            pick(lower_keys(joined), "NomeColaborador", "name")
        )
        if name:
            return name
    name = text_from_raw_optional(pick(row, "user_name", "userName"))
    if name:
        return name
    return resolver.user_name(user_id) or user_id
