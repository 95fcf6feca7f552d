# SPDX-License-Identifier: MIT

from typing import Any, Iterator, Protocol

from tidemark.model.change import ChangeNotification


class RemoteSource(Protocol):
    """Bulk access to the authoritative remote tables."""

    def fetch_rows(self, table: str) -> list[dict[str, Any]]: ...


class Subscription(Protocol):
    """One live connection to a change feed.

    Iteration yields notifications in arrival order and raises
    FeedDisconnectedError when the connection drops. Iteration ending
    normally means the feed has nothing more to send.
    """

    def __iter__(self) -> Iterator[ChangeNotification]: ...

    def close(self) -> None: ...


class ChangeFeed(Protocol):
    def subscribe(self) -> Subscription: ...

    def backoff(self, attempt: int) -> None: ...


def backoff_delay(attempt: int, base_seconds: float, max_seconds: float) -> float:
    """Exponential delay for the given 1-based reconnect attempt."""
    if attempt < 1 or base_seconds <= 0:
        return 0.0
    return min(max_seconds, base_seconds * 2 ** (attempt - 1))
