"""Indirect payload values.

A payload value of the form ``"$INPUT:<input-id>"`` means "whatever the user
typed into input <input-id>". Form state is supplied by the UI layer and only
read here. An empty or missing entry leaves the reference unresolved, and the
operation that carried it must not run.
"""

from collections.abc import Mapping
from typing import Any

INPUT_PREFIX = "$INPUT:"


class _Unresolved:
    """Marker for a reference with no usable input."""

    _instance = None

    def __new__(cls) -> "_Unresolved":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


UNRESOLVED = _Unresolved()


def input_ref(value: Any) -> str | None:
    """Input id referenced by a value, or None for literals."""
    if isinstance(value, str) and value.startswith(INPUT_PREFIX):
        return value[len(INPUT_PREFIX):].strip()
    return None


def resolve_value(value: Any, form_state: Mapping[str, Any]) -> Any:
    """
    Resolve a single payload value.

    Returns:
        The literal itself, the typed text (stripped), or UNRESOLVED
    """
    input_id = input_ref(value)
    if input_id is None:
        return value

    typed = form_state.get(input_id)
    if typed is None:
        return UNRESOLVED
    text = str(typed).strip()
    return text if text else UNRESOLVED


def _resolve(value: Any, form_state: Mapping[str, Any]) -> Any:
    """Resolve references at any depth of dicts and lists."""
    if isinstance(value, Mapping):
        record = {}
        for key, field_value in value.items():
            field_resolved = _resolve(field_value, form_state)
            if field_resolved is UNRESOLVED:
                return UNRESOLVED
            record[key] = field_resolved
        return record
    if isinstance(value, list):
        entries = []
        for entry in value:
            entry_resolved = _resolve(entry, form_state)
            if entry_resolved is UNRESOLVED:
                return UNRESOLVED
            entries.append(entry_resolved)
        return entries
    return resolve_value(value, form_state)


def resolve_payload(
    payload: Mapping[str, Any], form_state: Mapping[str, Any] | None
) -> dict[str, Any] | None:
    """
    Resolve every reference in a payload, however deeply nested in records and lists.

    Args:
        payload: Action payload
        form_state: input-id -> currently typed text

    Returns:
        New payload with literals substituted, or None if any reference is unresolved
    """
    resolved = _resolve(payload, form_state or {})
    return None if resolved is UNRESOLVED else resolved
