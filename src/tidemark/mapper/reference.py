# SPDX-License-Identifier: MIT

from typing import Optional, Protocol

from tidemark.model.client import ClientType
from tidemark.model.entity_id import EntityId


class ReferenceResolver(Protocol):
    """Read accessor the mappers use for denormalized cross-entity data.

    Implementations must answer from the data as it is at call time.
    """

    def user_name(self, user_id: EntityId) -> Optional[str]: ...

    def client_type(self, client_id: EntityId) -> Optional[ClientType]: ...

    def project_client_id(self, project_id: EntityId) -> Optional[EntityId]: ...

    def task_id_for_external(self, external_id: str) -> Optional[EntityId]: ...


class NullResolver:
    """Resolves nothing; every reference degrades to its placeholder."""

    def user_name(self, user_id: EntityId) -> Optional[str]:
        return None

    def client_type(self, client_id: EntityId) -> Optional[ClientType]:
        return None

    def project_client_id(self, project_id: EntityId) -> Optional[EntityId]:
        return None

    def task_id_for_external(self, external_id: str) -> Optional[EntityId]:
        return None


NULL_RESOLVER = NullResolver()
