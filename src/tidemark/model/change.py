# SPDX-License-Identifier: MIT

from typing import Any, Literal, NotRequired, Optional, TypedDict

OperationType = Literal["insert", "update", "delete"]

OPERATION_TYPES: tuple[str, ...] = ("insert", "update", "delete")


class ChangeNotification(TypedDict):
    table: str
    operation_type: str  # Matched case-insensitively
    new_row: NotRequired[Optional[dict[str, Any]]]
    old_row: NotRequired[Optional[dict[str, Any]]]  # Primary key only, for deletes
