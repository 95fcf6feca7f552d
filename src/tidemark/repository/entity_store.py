# SPDX-License-Identifier: MIT

import logging
import threading
from copy import deepcopy
from typing import Any, Callable, Iterable, Optional, TypeAlias

from tidemark.error import UnknownEntityKindError
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import ENTITY_TYPES, EntityType
from tidemark.model.snapshot import StoreSnapshot

logger = logging.getLogger(__name__)

StoreListener: TypeAlias = Callable[[str, int], None]


class EntityStore:
    """In-memory tables for the six entity kinds, keyed by primary id.

    Tables are ordered lists. Every mutation and every snapshot runs under
    one re-entrant lock and bumps the generation counter, so a snapshot
    always reflects a single instant.
    """

    def __init__(self) -> None:
        self._tables: dict[str, list[dict[str, Any]]] = {
            kind: [] for kind in ENTITY_TYPES
        }
        self._generation = 0
        self._lock = threading.RLock()
        self._listeners: list[StoreListener] = []

    @property
    def generation(self) -> int:
        return self._generation

    def __table(self, kind: str) -> list[dict[str, Any]]:
        if kind not in self._tables:
            raise UnknownEntityKindError(kind)
        return self._tables[kind]

    def __index_of(self, table: list[dict[str, Any]], id: EntityId) -> Optional[int]:
        for index, record in enumerate(table):
            if record["id"] == id:
                return index
        return None

    def bulk_replace(self, kind: str, records: Iterable[Any]) -> None:
        with self._lock:
            table = self.__table(kind)
            table[:] = [deepcopy(record) for record in records]
            self.__changed(kind)
        logger.debug("Replaced %s table with %d records", kind, len(table))

    def apply_upsert(self, kind: str, entity: Any) -> None:
        with self._lock:
            table = self.__table(kind)
            record = deepcopy(entity)
            index = self.__index_of(table, record["id"])
            if index is not None:
                table[index] = record
            elif kind == EntityType.TASK:
                # Newest tasks first
                table.insert(0, record)
            else:
                table.append(record)
            self.__changed(kind)

    def apply_delete(self, kind: str, id: EntityId) -> bool:
        with self._lock:
            table = self.__table(kind)
            index = self.__index_of(table, id)
            if index is None:
                logger.debug("Delete of unknown %s %s ignored", kind, id)
                return False
            del table[index]
            self.__changed(kind)
        return True

    def apply_delete_matching(
        self, kind: str, predicate: Callable[[Any], bool]
    ) -> int:
        """Remove every record the predicate accepts; returns how many went."""
        with self._lock:
            table = self.__table(kind)
            kept = [record for record in table if not predicate(record)]
            removed = len(table) - len(kept)
            if removed:
                table[:] = kept
                self.__changed(kind)
        return removed

    def get(self, kind: str, id: EntityId) -> Optional[Any]:
        with self._lock:
            table = self.__table(kind)
            index = self.__index_of(table, id)
            if index is None:
                return None
            return deepcopy(table[index])

    def find_first(self, kind: str, predicate: Callable[[Any], bool]) -> Optional[Any]:
        with self._lock:
            for record in self.__table(kind):
                if predicate(record):
                    return deepcopy(record)
        return None

    def all(self, kind: str) -> list[Any]:
        with self._lock:
            return deepcopy(self.__table(kind))

    def count(self, kind: str) -> int:
        with self._lock:
            return len(self.__table(kind))

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                generation=self._generation,
                clients=tuple(deepcopy(self._tables[EntityType.CLIENT])),
                projects=tuple(deepcopy(self._tables[EntityType.PROJECT])),
                tasks=tuple(deepcopy(self._tables[EntityType.TASK])),
                users=tuple(deepcopy(self._tables[EntityType.USER])),
                timesheet_entries=tuple(
                    deepcopy(self._tables[EntityType.TIMESHEET_ENTRY])
                ),
                project_memberships=tuple(
                    deepcopy(self._tables[EntityType.PROJECT_MEMBERSHIP])
                ),
            )

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener called with (kind, generation) after each change."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def __changed(self, kind: str) -> None:
        self._generation += 1
        for listener in list(self._listeners):
            try:
                listener(kind, self._generation)
            except Exception:
                logger.exception("Store listener failed on %s change", kind)
