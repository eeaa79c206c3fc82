"""Data Mutation Engine.

Applies one generic operation to a micro-app's data bag without a model
round trip. Every call is ``(action, payload, data) -> new data``; the input
bag is never modified. Key mismatches are healed (see ``resolver``), list
addressing failures are no-ops, and the only error raised is
``UnknownActionError`` for an operation outside the catalogue.
"""

import copy
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from neural_os.core import get_logger
from .forms import resolve_payload
from .items import as_record, item_label, locate_item, make_item
from .resolver import heal, requested_key
from .values import (
    FINISHED_KEY,
    RUNNING_KEY,
    ValueKind,
    kind_of,
    to_bool,
    to_number,
)

logger = get_logger(__name__)

DEFAULT_ITEM_LABEL = "New Item"

# Conventional keys when a payload names none and no entry of the kind exists
COUNT_KEY = "count"
TOGGLE_KEY = "is_active"
TIME_KEY = "time"
LIST_KEY = "items"
VALUE_KEY = "value"


class UnknownActionError(ValueError):
    """Operation name outside the closed catalogue."""

    def __init__(self, action: Any) -> None:
        super().__init__(f"Unknown action: {action!r}")
        self.action = action


class Operation(str, Enum):
    """Closed catalogue of local operations."""

    INCREMENT_COUNT = "INCREMENT_COUNT"
    SET_VALUE = "SET_VALUE"
    TOGGLE_STATE = "TOGGLE_STATE"
    START_TIMER = "START_TIMER"
    STOP_TIMER = "STOP_TIMER"
    RESET_TIMER = "RESET_TIMER"
    ADD_LIST_ITEM = "ADD_LIST_ITEM"
    TOGGLE_LIST_ITEM = "TOGGLE_LIST_ITEM"
    DELETE_LIST_ITEM = "DELETE_LIST_ITEM"
    EDIT_LIST_ITEM = "EDIT_LIST_ITEM"


OPERATION_ALIASES: dict[str, Operation] = {
    "ADD_ITEM": Operation.ADD_LIST_ITEM,
    "ADD_CHECKLIST_ITEM": Operation.ADD_LIST_ITEM,
    "APPEND_TO_LIST": Operation.ADD_LIST_ITEM,
    "TOGGLE_CHECKLIST_ITEM": Operation.TOGGLE_LIST_ITEM,
    "DELETE_CHECKLIST_ITEM": Operation.DELETE_LIST_ITEM,
    "EDIT_CHECKLIST_ITEM": Operation.EDIT_LIST_ITEM,
}


def parse_operation(action: str | Operation) -> Operation:
    """
    Map an action name onto the catalogue.

    Matching ignores case and treats ``-``, ``_`` and spaces alike, so
    ``increment-count`` and ``INCREMENT_COUNT`` name the same operation.

    Raises:
        UnknownActionError: If the name is not in the catalogue
    """
    if isinstance(action, Operation):
        return action
    if not isinstance(action, str):
        raise UnknownActionError(action)

    folded = action.strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return Operation(folded)
    except ValueError:
        pass
    if folded in OPERATION_ALIASES:
        return OPERATION_ALIASES[folded]
    raise UnknownActionError(action)


# ============================================================================
# Numeric / boolean / value operations
# ============================================================================


def _increment_count(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    key = heal(data, requested_key(payload), ValueKind.NUMBER, COUNT_KEY)
    amount = payload.get("amount")
    amount = 1 if amount is None else to_number(amount)
    data[key] = to_number(data[key]) + amount


def _set_value(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    value = payload.get("value")
    kind = kind_of(value)
    key = heal(data, requested_key(payload), kind, VALUE_KEY)
    data[key] = value


def _toggle_state(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    key = heal(data, requested_key(payload), ValueKind.BOOLEAN, TOGGLE_KEY)
    data[key] = not to_bool(data[key])


# ============================================================================
# Timer operations
# ============================================================================


def _heal_requested_time(data: dict[str, Any], payload: Mapping[str, Any]) -> None:
    requested = requested_key(payload)
    if requested is not None:
        heal(data, requested, ValueKind.NUMBER, TIME_KEY)


def _start_timer(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    _heal_requested_time(data, payload)
    if to_bool(data.get(RUNNING_KEY)):
        return
    data[RUNNING_KEY] = True
    data[FINISHED_KEY] = False


def _stop_timer(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    _heal_requested_time(data, payload)
    if not to_bool(data.get(RUNNING_KEY)):
        return
    data[RUNNING_KEY] = False


def _reset_timer(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    data[RUNNING_KEY] = False
    data[FINISHED_KEY] = False
    key = heal(data, requested_key(payload), ValueKind.NUMBER, TIME_KEY)
    initial = payload.get("initialValue", payload.get("initial_value"))
    data[key] = 0 if initial is None else to_number(initial)


# ============================================================================
# List operations
# ============================================================================


def _list_key(data: dict[str, Any], payload: Mapping[str, Any]) -> str:
    key = heal(data, requested_key(payload), ValueKind.LIST, LIST_KEY)
    if not isinstance(data[key], list):
        logger.warning("list_replaced", key=key, found=kind_of(data[key]).value)
        data[key] = []
    return key


def _add_list_item(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    key = _list_key(data, payload)

    record = payload.get("item")
    if isinstance(record, dict):
        label = item_label(record) or item_label_default
        item = make_item(label, record)
    else:
        value = payload.get("value")
        label = item_label_default if value in (None, "") else value
        item = make_item(label)
        if payload.get("category") is not None:
            item["category"] = payload["category"]

    data[key] = [*data[key], item]


def _update_list_item(
    data: dict[str, Any],
    payload: Mapping[str, Any],
    update: Callable[[list[Any], int], None],
) -> None:
    key = _list_key(data, payload)
    items = list(data[key])
    position = locate_item(items, payload)
    if position is None:
        logger.warning(
            "list_item_not_found",
            key=key,
            id=payload.get("id"),
            index=payload.get("index"),
            size=len(items),
        )
        return
    update(items, position)
    data[key] = items


def _toggle_list_item(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    def flip(items: list[Any], position: int) -> None:
        record = as_record(items[position])
        record["checked"] = not to_bool(record.get("checked"))
        items[position] = record

    _update_list_item(data, payload, flip)


def _delete_list_item(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    def remove(items: list[Any], position: int) -> None:
        del items[position]

    _update_list_item(data, payload, remove)


def _edit_list_item(data: dict[str, Any], payload: Mapping[str, Any], item_label_default: str) -> None:
    value = payload.get("value")
    changes = payload.get("item")
    if value is None and not isinstance(changes, dict):
        logger.info("edit_without_value", key=requested_key(payload))
        return

    def replace(items: list[Any], position: int) -> None:
        record = as_record(items[position])
        if isinstance(changes, dict):
            record.update({k: v for k, v in changes.items() if k != "id"})
        if value is not None:
            record["label"] = value
            if "value" in record:
                record["value"] = value
        items[position] = record

    _update_list_item(data, payload, replace)


Handler = Callable[[dict[str, Any], Mapping[str, Any], str], None]

HANDLERS: dict[Operation, Handler] = {
    Operation.INCREMENT_COUNT: _increment_count,
    Operation.SET_VALUE: _set_value,
    Operation.TOGGLE_STATE: _toggle_state,
    Operation.START_TIMER: _start_timer,
    Operation.STOP_TIMER: _stop_timer,
    Operation.RESET_TIMER: _reset_timer,
    Operation.ADD_LIST_ITEM: _add_list_item,
    Operation.TOGGLE_LIST_ITEM: _toggle_list_item,
    Operation.DELETE_LIST_ITEM: _delete_list_item,
    Operation.EDIT_LIST_ITEM: _edit_list_item,
}


def apply_action(
    action: str | Operation,
    payload: Mapping[str, Any] | None,
    data: Mapping[str, Any] | None,
    form_state: Mapping[str, Any] | None = None,
    *,
    default_item_label: str = DEFAULT_ITEM_LABEL,
) -> dict[str, Any]:
    """
    Apply one operation and return the next data bag.

    Args:
        action: Operation name (any spelling accepted by ``parse_operation``)
        payload: Target key, operands, list id/index; values may be $INPUT references
        data: Current data bag (not modified)
        form_state: input-id -> typed text, for $INPUT references
        default_item_label: Label for list items added without a value

    Returns:
        New data bag. If a $INPUT reference is unresolved the original bag is
        returned unchanged.

    Raises:
        UnknownActionError: If the action is not in the catalogue
    """
    operation = parse_operation(action)
    data = data if data is not None else {}

    resolved = resolve_payload(payload or {}, form_state)
    if resolved is None:
        logger.info("action_aborted_unresolved_input", action=operation.value)
        return data if isinstance(data, dict) else dict(data)

    working = copy.deepcopy(dict(data))
    HANDLERS[operation](working, resolved, default_item_label)

    logger.debug("action_applied", action=operation.value, payload=resolved)
    return working
