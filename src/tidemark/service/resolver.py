# SPDX-License-Identifier: MIT

import logging
from typing import Optional

from tidemark.model.client import ClientType
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.repository.entity_store import EntityStore

logger = logging.getLogger(__name__)


class StoreResolver:
    """Answers mapper lookups from the store's contents at call time."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def user_name(self, user_id: EntityId) -> Optional[str]:
        user = self._store.get(EntityType.USER, user_id)
        if user is None or not user["name"]:
            logger.debug("User %s unresolved", user_id)
            return None
        return user["name"]

    def client_type(self, client_id: EntityId) -> Optional[ClientType]:
        client = self._store.get(EntityType.CLIENT, client_id)
        if client is None:
            return None
        return client["client_type"]

    def project_client_id(self, project_id: EntityId) -> Optional[EntityId]:
        project = self._store.get(EntityType.PROJECT, project_id)
        if project is None or not project["client_id"]:
            return None
        return project["client_id"]

    def task_id_for_external(self, external_id: str) -> Optional[EntityId]:
        wanted = external_id.strip().lower()
        task = self._store.find_first(
            EntityType.TASK,
            lambda record: (record["external_id"] or "").strip().lower() == wanted,
        )
        if task is None:
            logger.debug("No task with external id %s", external_id)
            return None
        return task["id"]
