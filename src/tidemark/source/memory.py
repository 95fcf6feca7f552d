# SPDX-License-Identifier: MIT

import logging
import queue
import time
from collections import Counter
from copy import deepcopy
from typing import Any, Callable, Iterator, Optional

from tidemark.error import FeedDisconnectedError
from tidemark.model.change import ChangeNotification
from tidemark.source.protocol import backoff_delay

logger = logging.getLogger(__name__)

_DISCONNECT = object()
_END = object()
_WAKE = object()


class MemorySource:
    """Remote tables held in process, keyed by table name."""

    def __init__(self, tables: Optional[dict[str, list[dict[str, Any]]]] = None) -> None:
        self._tables: dict[str, list[dict[str, Any]]] = deepcopy(tables or {})
        self.fetch_counts: Counter[str] = Counter()

    def set_rows(self, table: str, rows: list[dict[str, Any]]) -> None:
        self._tables[table] = deepcopy(rows)

    def fetch_rows(self, table: str) -> list[dict[str, Any]]:
        self.fetch_counts[table] += 1
        return deepcopy(self._tables.get(table, []))


class QueueSubscription:
    def __init__(self, items: "queue.Queue[Any]") -> None:
        self._items = items
        self._closed = False

    def __iter__(self) -> Iterator[ChangeNotification]:
        while not self._closed:
            item = self._items.get()
            if item is _DISCONNECT:
                raise FeedDisconnectedError("change feed connection dropped")
            if item is _END:
                return
            if item is _WAKE:
                continue
            yield item

    def close(self) -> None:
        self._closed = True
        self._items.put(_WAKE)


class QueueChangeFeed:
    """Change feed fed from the same process through publish().

    All subscriptions read one shared queue, so changes published while
    disconnected are delivered after the next subscribe.
    """

    def __init__(
        self,
        backoff_seconds: float = 1.0,
        backoff_max_seconds: float = 30.0,
        sleep: Optional[Callable[[float], None]] = None,
        failed_subscribes: int = 0,
    ) -> None:
        self.backoff_seconds = backoff_seconds
        self.backoff_max_seconds = backoff_max_seconds
        self._sleep = sleep if sleep is not None else time.sleep
        self._items: "queue.Queue[Any]" = queue.Queue()
        self._failed_subscribes = failed_subscribes
        self.subscribe_count = 0
        self.backoff_attempts: list[int] = []

    def publish(self, notification: ChangeNotification) -> None:
        self._items.put(deepcopy(notification))

    def disconnect(self) -> None:
        """Drop the active connection after the changes already published."""
        self._items.put(_DISCONNECT)

    def end(self) -> None:
        """End the feed after the changes already published."""
        self._items.put(_END)

    def subscribe(self) -> QueueSubscription:
        self.subscribe_count += 1
        if self._failed_subscribes > 0:
            self._failed_subscribes -= 1
            raise FeedDisconnectedError("change feed handshake failed")
        return QueueSubscription(self._items)

    def backoff(self, attempt: int) -> None:
        self.backoff_attempts.append(attempt)
        delay = backoff_delay(attempt, self.backoff_seconds, self.backoff_max_seconds)
        logger.debug("Reconnecting in %.1fs (attempt %d)", delay, attempt)
        self._sleep(delay)
