# SPDX-License-Identifier: MIT

import logging
import time
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]

from tidemark.model.change import ChangeNotification
from tidemark.source.protocol import backoff_delay

logger = logging.getLogger(__name__)


def _load_list(path: Path) -> list[Any]:
    data = load(path.read_text(), Loader=Loader)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"{path} must hold a YAML list, found {type(data).__name__}")
    return data


class YamlSource:
    """Remote tables exported as one '<table>.yaml' list of rows each."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir

    def table_path(self, table: str) -> Path:
        return self.data_dir / f"{table}.yaml"

    def fetch_rows(self, table: str) -> list[dict[str, Any]]:
        path = self.table_path(table)
        if not path.is_file():
            logger.info("No export for table %s at %s", table, path)
            return []
        rows = _load_list(path)
        logger.debug("Read %d rows from %s", len(rows), path)
        return rows


class YamlChangeLogSubscription:
    def __init__(self, notifications: list[ChangeNotification]) -> None:
        self._notifications = notifications
        self._closed = False

    def __iter__(self) -> Iterator[ChangeNotification]:
        for notification in self._notifications:
            if self._closed:
                return
            yield notification

    def close(self) -> None:
        self._closed = True


class YamlChangeLog:
    """Replays a recorded change log once; the feed ends after the last entry."""

    def __init__(
        self,
        path: Path,
        backoff_seconds: float = 1.0,
        backoff_max_seconds: float = 30.0,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.path = path
        self.backoff_seconds = backoff_seconds
        self.backoff_max_seconds = backoff_max_seconds
        self._sleep = sleep if sleep is not None else time.sleep

    def subscribe(self) -> YamlChangeLogSubscription:
        notifications = _load_list(self.path)
        logger.info("Replaying %d changes from %s", len(notifications), self.path)
        return YamlChangeLogSubscription(notifications)

    def backoff(self, attempt: int) -> None:
        self._sleep(
            backoff_delay(attempt, self.backoff_seconds, self.backoff_max_seconds)
        )
