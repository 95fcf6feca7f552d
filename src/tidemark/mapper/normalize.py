# SPDX-License-Identifier: MIT

import datetime
import unicodedata
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import pendulum

from tidemark import time
from tidemark.model.entity_id import EntityId, entity_id_from_raw
from tidemark.model.project import ProjectStatus
from tidemark.model.task import Impact, Priority, TaskStatus

_NULL_STRINGS = ("", "null", "none", "undefined")
_TRUE_STRINGS = ("true", "t", "1", "yes", "y", "sim", "s")
_FALSE_STRINGS = ("false", "f", "0", "no", "n", "nao", "não")

RawRow = dict[str, Any]


def lower_keys(raw: RawRow) -> RawRow:
    """Index a raw row by lower-cased column name."""
    return {str(key).strip().lower(): value for key, value in raw.items()}


def pick(row: RawRow, *names: str) -> Any:
    """First present, non-blank value among the candidate column names."""
    for name in names:
        value = row.get(name.lower())
        if value is None:
            continue
        if isinstance(value, str) and value.strip().lower() in _NULL_STRINGS:
            continue
        return value
    return None


def fold(text: str) -> str:
    """Lower-case and strip accents so 'Concluído' matches 'conclu'."""
    decomposed = unicodedata.normalize("NFKD", text.strip().lower())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def text_from_raw(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    if text.lower() in _NULL_STRINGS:
        return default
    return text


def text_from_raw_optional(value: Any) -> Optional[str]:
    text = text_from_raw(value)
    return text if text != "" else None


def id_from_raw_optional(value: Any) -> Optional[EntityId]:
    entity_id = entity_id_from_raw(value)
    if entity_id in ("", "0"):
        return None
    return entity_id


def id_list_from_raw(value: Any) -> list[EntityId]:
    if value is None:
        return []
    if isinstance(value, str):
        candidates: list[Any] = value.replace(";", ",").split(",")
    elif isinstance(value, (list, tuple, set)):
        candidates = list(value)
    else:
        candidates = [value]
    ids = [id_from_raw_optional(candidate) for candidate in candidates]
    # Deduplicate, keeping first-seen order
    return list(dict.fromkeys(entity_id for entity_id in ids if entity_id))


def decimal_from_raw(value: Any, default: Decimal = Decimal(0)) -> Decimal:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        text = str(value).strip().replace(" ", "")
        if "," in text and "." in text:
            if text.rfind(",") > text.rfind("."):
                # 1.234,56 -> 1234.56
                text = text.replace(".", "").replace(",", ".")
            else:
                text = text.replace(",", "")
        elif "," in text:
            text = text.replace(",", ".")
        try:
            result = Decimal(text)
        except InvalidOperation:
            return default
    if not result.is_finite():
        return default
    return result


def decimal_from_raw_optional(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    sentinel = Decimal("NaN")
    result = decimal_from_raw(value, default=sentinel)
    return None if result.is_nan() else result


def bool_from_raw(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    text = fold(str(value))
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    return default


def date_from_raw(value: Any) -> Optional[pendulum.Date]:
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return pendulum.date(value.year, value.month, value.day)
    if isinstance(value, datetime.date):
        return pendulum.date(value.year, value.month, value.day)
    text = text_from_raw(value)
    if text == "":
        return None
    try:
        return time.date_from_str(text)
    except ValueError:
        return None


def clock_from_raw(value: Any) -> Optional[str]:
    """Normalize a clock time to 'HH:mm'; invalid values map to None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime.time):
        return f"{value.hour:02d}:{value.minute:02d}"
    if isinstance(value, int):
        # YAML 1.1 reads unquoted 18:00 as the sexagesimal integer 1080
        if not 0 <= value < 24 * 60:
            return None
        return f"{value // 60:02d}:{value % 60:02d}"
    text = text_from_raw(value)
    if text == "":
        return None
    try:
        minutes = time.minutes_from_clock_str(text)
    except (ValueError, IndexError):
        return None
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def clamp_percentage(value: Decimal) -> Decimal:
    return min(Decimal(100), max(Decimal(0), value))


def normalize_task_status(raw: Any) -> TaskStatus:
    if raw is None:
        return "todo"
    s = fold(str(raw))
    if "conclu" in s or "done" in s or "finaliz" in s:
        return "done"
    if any(
        marker in s
        for marker in ("trabalhando", "andamento", "progresso", "progress", "execu")
    ):
        return "in_progress"
    if any(marker in s for marker in ("teste", "revis", "review", "valida")):
        return "review"
    return "todo"


def normalize_project_status(raw: Any) -> ProjectStatus:
    if raw is None:
        return "in_progress"
    s = fold(str(raw))
    if "conclu" in s or "done" in s or "finaliz" in s:
        return "done"
    if "cancel" in s:
        return "cancelled"
    if "paus" in s or "suspen" in s or "hold" in s:
        return "paused"
    if any(
        marker in s for marker in ("planej", "planning", "a iniciar", "not started")
    ):
        return "planning"
    return "in_progress"


def normalize_priority(raw: Any) -> Optional[Priority]:
    if raw is None:
        return None
    s = fold(str(raw))
    if "critica" in s or "critical" in s or "urgente" in s:
        return "critical"
    if "alta" in s or "high" in s:
        return "high"
    if "media" in s or "medium" in s:
        return "medium"
    if "baixa" in s or "low" in s:
        return "low"
    return None


def normalize_impact(raw: Any) -> Optional[Impact]:
    if raw is None:
        return None
    s = fold(str(raw))
    if "alto" in s or "high" in s:
        return "high"
    if "medio" in s or "medium" in s:
        return "medium"
    if "baixo" in s or "low" in s:
        return "low"
    return None
