"""List item records: creation, addressing, and id assignment."""

from collections.abc import Mapping
from typing import Any

from neural_os.core.id import new_item_id
from .values import to_text

LABEL_FIELDS = ("label", "name", "value", "title", "text")


def item_label(item: Any) -> str:
    """Primary display string of a list item."""
    if isinstance(item, dict):
        for field_name in LABEL_FIELDS:
            if item.get(field_name) not in (None, ""):
                return to_text(item[field_name])
        return ""
    return to_text(item)


def make_item(label: Any, record: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """New unchecked list item with a fresh stable id."""
    item = dict(record or {})
    item.pop("id", None)
    item.setdefault("label", to_text(label))
    item.setdefault("checked", False)
    item["id"] = new_item_id()
    return item


def as_record(item: Any) -> dict[str, Any]:
    """Copy of an item as a record; bare scalars become labelled items."""
    if isinstance(item, dict):
        return dict(item)
    return {"label": to_text(item), "checked": False}


def locate_item(items: list[Any], payload: Mapping[str, Any]) -> int | None:
    """
    Position of the item a payload addresses.

    The stable ``id`` wins when present; ``index`` is used only when the
    payload carries no id. Stale ids and out-of-range indexes give None.
    """
    item_id = payload.get("id")
    if item_id is not None:
        for position, item in enumerate(items):
            if isinstance(item, dict) and str(item.get("id")) == str(item_id):
                return position
        return None

    index = payload.get("index")
    if isinstance(index, bool) or index is None:
        return None
    if isinstance(index, str):
        try:
            index = int(index.strip())
        except ValueError:
            return None
    if isinstance(index, float):
        if not index.is_integer():
            return None
        index = int(index)
    if not isinstance(index, int) or not 0 <= index < len(items):
        return None
    return index


def ensure_item_ids(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Copy of a data bag where every record inside a list carries an id.

    Used when a generated data bag replaces an app's state, so rendered
    list items can be addressed by id from then on.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, list):
            healed = []
            for item in value:
                if isinstance(item, dict) and item.get("id") in (None, ""):
                    item = {**item, "id": new_item_id()}
                healed.append(item)
            value = healed
        result[key] = value
    return result
