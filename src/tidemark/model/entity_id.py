# SPDX-License-Identifier: MIT

from typing import Any, TypeAlias

EntityId: TypeAlias = str


def entity_id_from_raw(value: Any) -> EntityId:
    """Stringify a remote primary/foreign key; blank and 'null' become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    if text.lower() in ("null", "none", "undefined"):
        return ""
    return text
