# SPDX-License-Identifier: MIT

from typing import TypedDict


class LoadStats(TypedDict):
    kind: str
    table: str
    fetched: int
    loaded: int
    dropped: int  # Malformed rows
