# SPDX-License-Identifier: MIT

from typing import Optional


class EntityType:
    CLIENT = "client"
    PROJECT = "project"
    TASK = "task"
    USER = "user"
    TIMESHEET_ENTRY = "timesheet_entry"
    PROJECT_MEMBERSHIP = "project_membership"


# Bulk-load order: referenced kinds come before the kinds that resolve them
ENTITY_TYPES: tuple[str, ...] = (
    EntityType.USER,
    EntityType.CLIENT,
    EntityType.PROJECT,
    EntityType.TASK,
    EntityType.PROJECT_MEMBERSHIP,
    EntityType.TIMESHEET_ENTRY,
)

# Remote table each kind is fetched from
SOURCE_TABLES: dict[str, str] = {
    EntityType.CLIENT: "dim_clientes",
    EntityType.PROJECT: "dim_projetos",
    EntityType.TASK: "fato_tarefas_v2",
    EntityType.USER: "dim_colaboradores",
    EntityType.TIMESHEET_ENTRY: "horas_trabalhadas",
    EntityType.PROJECT_MEMBERSHIP: "project_members",
}

# Table names seen on the change feed
TABLE_ALIASES: dict[str, str] = {
    **{table: kind for kind, table in SOURCE_TABLES.items()},
    "fato_tarefas": EntityType.TASK,
    **{kind: kind for kind in ENTITY_TYPES},
}


def kind_for_table(table: str) -> Optional[str]:
    return TABLE_ALIASES.get(table.strip().lower())
