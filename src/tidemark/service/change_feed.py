# SPDX-License-Identifier: MIT

import logging
import threading
from collections import Counter
from enum import Enum
from typing import Any, Optional

from tidemark.error import FeedDisconnectedError, MalformedRecordError
from tidemark.mapper.dispatch import extract_id, map_record
from tidemark.mapper.normalize import id_from_raw_optional, lower_keys, pick
from tidemark.mapper.project_membership import PROJECT_FIELDS, USER_FIELDS
from tidemark.mapper.reference import ReferenceResolver
from tidemark.mapper.task import refresh_task_names
from tidemark.model.change import OPERATION_TYPES, ChangeNotification
from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType, kind_for_table
from tidemark.repository.entity_store import EntityStore
from tidemark.service.bulk_load import BulkLoader
from tidemark.source.protocol import ChangeFeed, Subscription

logger = logging.getLogger(__name__)


class FeedState(Enum):
    CONNECTING = "connecting"
    SUBSCRIBED = "subscribed"
    CLOSED = "closed"


class ApplyOutcome(Enum):
    APPLIED = "applied"
    DELETED = "deleted"
    IGNORED = "ignored"
    DROPPED = "dropped"


class ChangeFeedConsumer:
    """Applies change notifications to the store and owns the subscription.

    run() blocks: it subscribes, applies notifications one at a time in
    arrival order, and on a dropped connection backs off, reconnects and
    resynchronizes every table from the bulk loader. It returns once
    close() is called or the feed ends.
    """

    def __init__(
        self,
        store: EntityStore,
        feed: ChangeFeed,
        loader: BulkLoader,
        resolver: ReferenceResolver,
        refresh_dependent_tasks: bool = True,
    ) -> None:
        self._store = store
        self._feed = feed
        self._loader = loader
        self._resolver = resolver
        self._refresh_dependent_tasks = refresh_dependent_tasks
        self._state = FeedState.CONNECTING
        self._subscription: Optional[Subscription] = None
        self._lock = threading.Lock()
        self.resync_count = 0
        self.outcomes: Counter[ApplyOutcome] = Counter()

    @property
    def state(self) -> FeedState:
        return self._state

    def run(self) -> None:
        attempt = 0
        needs_resync = False

        while self._state != FeedState.CLOSED:
            try:
                subscription = self._feed.subscribe()
            except FeedDisconnectedError as e:
                attempt += 1
                logger.warning("Subscribe failed (attempt %d): %s", attempt, e)
                self._feed.backoff(attempt)
                continue

            with self._lock:
                if self._state == FeedState.CLOSED:
                    subscription.close()
                    break
                self._subscription = subscription
                self._state = FeedState.SUBSCRIBED
            logger.info("Subscribed to change feed")

            if needs_resync:
                logger.info("Resynchronizing all tables after reconnect")
                try:
                    self._loader.load_all()
                except Exception as e:
                    # The source is unreachable or served bad data; reconnect
                    # and resync again
                    logger.warning("Resync failed: %s", e, exc_info=True)
                    if not self.__drop_subscription(subscription):
                        break
                    attempt += 1
                    self._feed.backoff(attempt)
                    continue
                self.resync_count += 1
                needs_resync = False
            attempt = 0

            try:
                for notification in subscription:
                    if self._state == FeedState.CLOSED:
                        break
                    self.handle(notification)
            except FeedDisconnectedError as e:
                logger.warning("Change feed dropped: %s", e)
                if not self.__drop_subscription(subscription):
                    break
                attempt += 1
                needs_resync = True
                self._feed.backoff(attempt)
                continue

            if self._state != FeedState.CLOSED:
                logger.info("Change feed ended")
            self.close()

    def close(self) -> None:
        with self._lock:
            if self._state == FeedState.CLOSED:
                return
            self._state = FeedState.CLOSED
            subscription = self._subscription
            self._subscription = None
        if subscription is not None:
            subscription.close()
        logger.debug("Change feed consumer closed")

    def __drop_subscription(self, subscription: Subscription) -> bool:
        """Close a failed subscription and go back to CONNECTING.

        Returns False when the consumer was closed meanwhile.
        """
        with self._lock:
            self._subscription = None
            if self._state == FeedState.CLOSED:
                return False
            self._state = FeedState.CONNECTING
        subscription.close()
        return True

    def handle(self, notification: ChangeNotification) -> ApplyOutcome:
        outcome = self.__apply(notification)
        self.outcomes[outcome] += 1
        return outcome

    def __apply(self, notification: ChangeNotification) -> ApplyOutcome:
        if not isinstance(notification, dict):
            logger.warning("Ignoring change notification that is not a mapping")
            return ApplyOutcome.IGNORED

        table = str(notification.get("table") or "")
        kind = kind_for_table(table)
        if kind is None:
            logger.warning("Ignoring change on unknown table %r", table)
            return ApplyOutcome.IGNORED

        operation = str(notification.get("operation_type") or "").strip().lower()
        if operation not in OPERATION_TYPES:
            logger.warning("Ignoring unknown operation %r on %s", operation, table)
            return ApplyOutcome.IGNORED

        if operation == "delete":
            return self.__apply_delete(
                kind, notification.get("old_row") or notification.get("new_row")
            )

        try:
            entity = map_record(kind, notification.get("new_row"), self._resolver)
        except MalformedRecordError as e:
            logger.warning("Dropped %s on %s: %s", operation, table, e.reason)
            return ApplyOutcome.DROPPED

        self._store.apply_upsert(kind, entity)
        if kind == EntityType.USER and self._refresh_dependent_tasks:
            self.__refresh_tasks_of(entity["id"])
        return ApplyOutcome.APPLIED

    def __apply_delete(self, kind: str, raw: Any) -> ApplyOutcome:
        try:
            entity_id = extract_id(kind, raw)
        except MalformedRecordError as e:
            logger.warning("Dropped delete on %s: %s", kind, e.reason)
            return ApplyOutcome.DROPPED

        if self._store.apply_delete(kind, entity_id):
            return ApplyOutcome.DELETED
        if kind == EntityType.PROJECT_MEMBERSHIP and self.__delete_membership_pair(raw):
            return ApplyOutcome.DELETED
        return ApplyOutcome.IGNORED

    def __delete_membership_pair(self, raw: dict[str, Any]) -> bool:
        # Deletes may name the pair while the stored row kept its own id
        row = lower_keys(raw)
        project_id = id_from_raw_optional(pick(row, *PROJECT_FIELDS))
        user_id = id_from_raw_optional(pick(row, *USER_FIELDS))
        if project_id is None or user_id is None:
            return False
        removed = self._store.apply_delete_matching(
            EntityType.PROJECT_MEMBERSHIP,
            lambda m: m["project_id"] == project_id and m["user_id"] == user_id,
        )
        return removed > 0

    def __refresh_tasks_of(self, user_id: EntityId) -> None:
        for task in self._store.all(EntityType.TASK):
            if task["developer_id"] != user_id and user_id not in task["collaborator_ids"]:
                continue
            refreshed = refresh_task_names(task, self._resolver)
            if refreshed != task:
                self._store.apply_upsert(EntityType.TASK, refreshed)
