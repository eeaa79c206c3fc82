"""Data Mutation Engine - local, model-free updates to micro-app data."""

from .actions import (
    DEFAULT_ITEM_LABEL,
    Operation,
    UnknownActionError,
    apply_action,
    parse_operation,
)
from .forms import INPUT_PREFIX, resolve_payload
from .items import ensure_item_ids, locate_item
from .resolver import Resolution, heal, resolve_key
from .ticker import TickDriver, advance_apps, advance_timer
from .values import FINISHED_KEY, RUNNING_KEY, ValueKind, describe, kind_of

__all__ = [
    # Actions
    "DEFAULT_ITEM_LABEL",
    "Operation",
    "UnknownActionError",
    "apply_action",
    "parse_operation",
    # Forms
    "INPUT_PREFIX",
    "resolve_payload",
    # Items
    "ensure_item_ids",
    "locate_item",
    # Resolution
    "Resolution",
    "heal",
    "resolve_key",
    # Ticking
    "TickDriver",
    "advance_apps",
    "advance_timer",
    # Values
    "FINISHED_KEY",
    "RUNNING_KEY",
    "ValueKind",
    "describe",
    "kind_of",
]
