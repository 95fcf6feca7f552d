# SPDX-License-Identifier: MIT

from typing import Any, Optional


class TidemarkError(Exception):
    """Base class for errors raised inside the sync subsystem."""

    pass


class MalformedRecordError(TidemarkError):
    """Raised by the mappers when a raw row lacks a required field.

    The record is never partially applied; callers log the error and drop
    the row.
    """

    def __init__(
        self, kind: str, reason: str, raw: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(f"malformed {kind} record: {reason}")
        self.kind = kind
        self.reason = reason
        self.raw = raw


class FeedDisconnectedError(TidemarkError):
    """Raised by a subscription when the change feed connection drops."""

    pass


class UnknownEntityKindError(TidemarkError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"unknown entity kind: {kind!r}")
        self.kind = kind
