"""Data bag value kinds.

A data bag is an open mapping of string keys to JSON values. Each entry is
classified into a small tagged union so that key resolution can do a typed
lookup instead of ad hoc isinstance checks scattered through the engine.
"""

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

# Conventional keys used by timer-style apps
RUNNING_KEY = "is_running"
FINISHED_KEY = "finished"


class ValueKind(str, Enum):
    """Kind tag for a data bag entry."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    LIST = "list"
    TEXT = "text"
    RECORD = "record"
    NULL = "null"


def kind_of(value: Any) -> ValueKind:
    """Classify a value. Booleans are never numbers."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, list):
        return ValueKind.LIST
    if isinstance(value, dict):
        return ValueKind.RECORD
    return ValueKind.TEXT


def describe(data: Mapping[str, Any]) -> dict[str, ValueKind]:
    """Infer the kind of every entry, in key order."""
    return {key: kind_of(value) for key, value in data.items()}


def default_for(kind: ValueKind) -> Any:
    """Type-appropriate default for a missing entry (fresh object each call)."""
    match kind:
        case ValueKind.NUMBER:
            return 0
        case ValueKind.BOOLEAN:
            return False
        case ValueKind.LIST:
            return []
        case ValueKind.TEXT:
            return ""
        case ValueKind.RECORD:
            return {}
        case _:
            return None


# ============================================================================
# Coercions
# ============================================================================


def to_number(value: Any) -> int | float:
    """Numeric parse; anything unparsable is 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return 0
        return parsed if math.isfinite(parsed) else 0
    return 0


def to_bool(value: Any) -> bool:
    """Boolean coercion that understands "false"/"0"/"no" strings."""
    if isinstance(value, str):
        return value.strip().lower() not in ("", "false", "0", "no", "off", "null", "none")
    return bool(value)


def to_list(value: Any) -> list[Any]:
    """Shallow copy of a list; anything else is an empty list."""
    return list(value) if isinstance(value, list) else []


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ============================================================================
# Default-safe reads
# ============================================================================


def read_number(data: Mapping[str, Any], key: str | None, default: int | float = 0) -> int | float:
    if key is None or key not in data:
        return default
    return to_number(data[key])


def read_bool(data: Mapping[str, Any], key: str | None, default: bool = False) -> bool:
    if key is None or key not in data:
        return default
    return to_bool(data[key])


def read_list(data: Mapping[str, Any], key: str | None) -> list[Any]:
    if key is None:
        return []
    return to_list(data.get(key))


def read_text(data: Mapping[str, Any], key: str | None, default: str = "") -> str:
    if key is None or key not in data:
        return default
    return to_text(data[key])
