# SPDX-License-Identifier: MIT

import logging
from typing import Any

from tidemark.error import MalformedRecordError
from tidemark.mapper.client import check_partner
from tidemark.mapper.dispatch import map_record
from tidemark.mapper.reference import NULL_RESOLVER, ReferenceResolver
from tidemark.model.client import Client
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import ENTITY_TYPES, SOURCE_TABLES, EntityType
from tidemark.model.load import LoadStats
from tidemark.repository.entity_store import EntityStore
from tidemark.source.protocol import RemoteSource

logger = logging.getLogger(__name__)


class BulkLoader:
    """Fetches every remote table and replaces the store's copy of it."""

    def __init__(
        self, store: EntityStore, source: RemoteSource, resolver: ReferenceResolver
    ) -> None:
        self._store = store
        self._source = source
        self._resolver = resolver

    def load_all(self) -> list[LoadStats]:
        # Referenced kinds first so their dependents resolve against fresh data
        stats = [self.load_kind(kind) for kind in ENTITY_TYPES]
        logger.info(
            "Bulk load complete: %s",
            ", ".join(f"{s['kind']}={s['loaded']}" for s in stats),
        )
        return stats

    def load_kind(self, kind: str) -> LoadStats:
        table = SOURCE_TABLES[kind]
        rows = self._source.fetch_rows(table)

        # Clients reference each other; their partners are checked against
        # this batch once it is mapped, not against the table it replaces
        resolver = NULL_RESOLVER if kind == EntityType.CLIENT else self._resolver

        records: dict[EntityId, Any] = {}
        dropped = 0
        for raw in rows:
            try:
                record = map_record(kind, raw, resolver)
            except MalformedRecordError as e:
                logger.warning("Dropped row from %s: %s", table, e.reason)
                dropped += 1
                continue
            if record["id"] in records:
                logger.debug("Duplicate %s %s in bulk load; last row wins", kind, record["id"])
            records[record["id"]] = record

        if kind == EntityType.CLIENT:
            self.__check_client_partners(records)

        self._store.bulk_replace(kind, records.values())
        return {
            "kind": kind,
            "table": table,
            "fetched": len(rows),
            "loaded": len(records),
            "dropped": dropped,
        }

    def __check_client_partners(self, clients: dict[EntityId, Client]) -> None:
        for client in clients.values():
            if client["partner_id"] is None:
                continue
            partner = clients.get(client["partner_id"])
            check_partner(client, partner["client_type"] if partner else None)
