# SPDX-License-Identifier: MIT

import logging
import threading
from types import TracebackType
from typing import Optional

from tidemark.model.load import LoadStats
from tidemark.model.snapshot import StoreSnapshot
from tidemark.repository.entity_store import EntityStore
from tidemark.service.bulk_load import BulkLoader
from tidemark.service.change_feed import ChangeFeedConsumer
from tidemark.service.resolver import StoreResolver
from tidemark.source.protocol import ChangeFeed, RemoteSource

logger = logging.getLogger(__name__)


class SyncSession:
    """Owns one store and everything that writes to it.

    The store lives exactly as long as the session; closing the session
    unsubscribes from the change feed.
    """

    def __init__(
        self,
        source: RemoteSource,
        feed: Optional[ChangeFeed] = None,
        refresh_dependent_tasks: bool = True,
    ) -> None:
        self.store = EntityStore()
        self.resolver = StoreResolver(self.store)
        self.loader = BulkLoader(self.store, source, self.resolver)
        self.consumer: Optional[ChangeFeedConsumer] = None
        if feed is not None:
            self.consumer = ChangeFeedConsumer(
                self.store,
                feed,
                self.loader,
                self.resolver,
                refresh_dependent_tasks=refresh_dependent_tasks,
            )
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "SyncSession":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def load(self) -> list[LoadStats]:
        return self.loader.load_all()

    def follow(self) -> None:
        """Apply feed changes on the calling thread until closed or the feed ends."""
        if self.consumer is None:
            raise ValueError("session has no change feed")
        self.consumer.run()

    def start(self) -> threading.Thread:
        """Apply feed changes on a background thread."""
        if self.consumer is None:
            raise ValueError("session has no change feed")
        self._thread = threading.Thread(
            target=self.consumer.run, name="tidemark-change-feed", daemon=True
        )
        self._thread.start()
        return self._thread

    def snapshot(self) -> StoreSnapshot:
        return self.store.snapshot()

    def close(self, timeout: Optional[float] = 5.0) -> None:
        if self.consumer is not None:
            self.consumer.close()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Change feed thread still running after close")
            self._thread = None
