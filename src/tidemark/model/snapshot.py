# SPDX-License-Identifier: MIT

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Optional

from tidemark.error import UnknownEntityKindError
from tidemark.model.client import Client
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.project import Project
from tidemark.model.project_membership import ProjectMembership
from tidemark.model.task import Task
from tidemark.model.timesheet_entry import TimesheetEntry
from tidemark.model.user import User


@dataclass(frozen=True)
class StoreSnapshot:
    """All six tables as they were at one instant.

    Records are deep copies owned by the snapshot; later store mutations
    never show through. Every reader of one snapshot sees the same record
    dicts, so readers must treat them as read-only and copy before editing.
    Each call to EntityStore.snapshot() hands out its own copies.
    """

    generation: int
    clients: tuple[Client, ...] = ()
    projects: tuple[Project, ...] = ()
    tasks: tuple[Task, ...] = ()
    users: tuple[User, ...] = ()
    timesheet_entries: tuple[TimesheetEntry, ...] = ()
    project_memberships: tuple[ProjectMembership, ...] = ()

    def table(self, kind: str) -> tuple[Any, ...]:
        match kind:
            case EntityType.CLIENT:
                return self.clients
            case EntityType.PROJECT:
                return self.projects
            case EntityType.TASK:
                return self.tasks
            case EntityType.USER:
                return self.users
            case EntityType.TIMESHEET_ENTRY:
                return self.timesheet_entries
            case EntityType.PROJECT_MEMBERSHIP:
                return self.project_memberships
        raise UnknownEntityKindError(kind)

    @cached_property
    def _client_index(self) -> dict[EntityId, Client]:
        return {client["id"]: client for client in self.clients}

    @cached_property
    def _project_index(self) -> dict[EntityId, Project]:
        return {project["id"]: project for project in self.projects}

    @cached_property
    def _task_index(self) -> dict[EntityId, Task]:
        return {task["id"]: task for task in self.tasks}

    @cached_property
    def _user_index(self) -> dict[EntityId, User]:
        return {user["id"]: user for user in self.users}

    def client(self, id: EntityId) -> Optional[Client]:
        return self._client_index.get(id)

    def project(self, id: EntityId) -> Optional[Project]:
        return self._project_index.get(id)

    def task(self, id: EntityId) -> Optional[Task]:
        return self._task_index.get(id)

    def user(self, id: EntityId) -> Optional[User]:
        return self._user_index.get(id)
