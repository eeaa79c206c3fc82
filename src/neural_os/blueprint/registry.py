"""Block Registry - fixed mapping from block tag to rendering rule.

Every rule has the signature ``(block, children, data, dispatch) -> RenderedNode``
and is pure: it reads data through default-safe helpers and only wires
handlers that call ``dispatch`` later, when the user interacts.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from neural_os.engine.items import item_label
from neural_os.engine.values import (
    FINISHED_KEY,
    RUNNING_KEY,
    read_bool,
    read_list,
    read_number,
    read_text,
    to_bool,
    to_number,
    to_text,
)
from .models import Block

Dispatch = Callable[[str, dict[str, Any]], None]
Handler = Callable[..., None]

FALLBACK_KIND = "Fallback"


@dataclass
class RenderedNode:
    """One node of the visual tree handed to the host UI."""

    kind: str
    props: dict[str, Any] = field(default_factory=dict)
    children: list["RenderedNode"] = field(default_factory=list)
    handlers: dict[str, Handler] = field(default_factory=dict)

    def walk(self):
        """Depth-first, pre-order iteration over this node and its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, kind: str) -> list["RenderedNode"]:
        """All descendants (including self) of the given kind."""
        return [node for node in self.walk() if node.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        """Serializable view; handlers are listed by event name."""
        built: dict[int, dict[str, Any]] = {}
        # Reversed pre-order visits every child before its parent
        for node in reversed(list(self.walk())):
            built[id(node)] = {
                "kind": node.kind,
                "props": node.props,
                "handlers": sorted(node.handlers),
                "children": [built[id(child)] for child in node.children],
            }
        return built[id(self)]


RenderRule = Callable[[Block, list[RenderedNode], Mapping[str, Any], Dispatch], RenderedNode]

_RULES: dict[str, RenderRule] = {}


def _rule(*tags: str) -> Callable[[RenderRule], RenderRule]:
    def register(fn: RenderRule) -> RenderRule:
        for tag in tags:
            _RULES[tag] = fn
        return fn
    return register


def _click(dispatch: Dispatch, action: str | None, payload: Mapping[str, Any]) -> dict[str, Handler]:
    if not action:
        return {}
    frozen = dict(payload)
    return {"click": lambda: dispatch(action, dict(frozen))}


def _base_props(block: Block) -> dict[str, Any]:
    props: dict[str, Any] = {}
    if block.id:
        props["id"] = block.id
    if block.style:
        props["style"] = block.style
    if block.variant:
        props["variant"] = block.variant
    return props


# ============================================================================
# Layout
# ============================================================================


@_rule("Card")
def render_card(block, children, data, dispatch):
    props = _base_props(block)
    if block.label:
        props["label"] = block.label
    return RenderedNode("Card", props, children)


@_rule("Row")
def render_row(block, children, data, dispatch):
    return RenderedNode("Row", _base_props(block), children)


# ============================================================================
# Text
# ============================================================================


@_rule("H1")
def render_heading(block, children, data, dispatch):
    props = _base_props(block)
    props["text"] = read_text(data, block.value_key, block.display_text)
    return RenderedNode("H1", props, children)


@_rule("Text")
def render_text(block, children, data, dispatch):
    props = _base_props(block)
    props["text"] = block.display_text
    if block.value_key:
        props["value"] = read_text(data, block.value_key)
    return RenderedNode("Text", props, children)


@_rule("Icon")
def render_icon(block, children, data, dispatch):
    props = _base_props(block)
    props["name"] = block.icon or to_text(block.value) or "Activity"
    return RenderedNode("Icon", props, children)


@_rule("Image")
def render_image(block, children, data, dispatch):
    props = _base_props(block)
    props["src"] = block.src or ""
    props["alt"] = block.label or "App content"
    return RenderedNode("Image", props, children)


# ============================================================================
# Values
# ============================================================================


@_rule("Stat")
def render_stat(block, children, data, dispatch):
    props = _base_props(block)
    props["label"] = block.label or ""
    if block.value_key:
        props["value"] = read_number(data, block.value_key)
    else:
        props["value"] = to_number(block.value)
    if block.icon:
        props["icon"] = block.icon
    return RenderedNode("Stat", props, children)


@_rule("Toggle")
def render_toggle(block, children, data, dispatch):
    key = block.state_key or block.value_key
    props = _base_props(block)
    props["label"] = block.label or ""
    props["on"] = read_bool(data, key)
    payload = dict(block.payload)
    if key:
        payload.setdefault("key", key)
    handlers = _click(dispatch, block.action or "TOGGLE_STATE", payload)
    return RenderedNode("Toggle", props, children, handlers)


def format_clock(seconds: int | float) -> str:
    """Seconds as MM:SS (or H:MM:SS past an hour)."""
    total = max(int(seconds), 0)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


@_rule("Timer")
def render_timer(block, children, data, dispatch):
    seconds = read_number(data, block.value_key)
    props = _base_props(block)
    props.update(
        label=block.label or "",
        seconds=seconds,
        display=format_clock(seconds),
        running=read_bool(data, RUNNING_KEY),
        finished=read_bool(data, FINISHED_KEY),
    )
    return RenderedNode("Timer", props, children)


# ============================================================================
# Buttons
# ============================================================================


@_rule("Btn", "BtnSec")
def render_button(block, children, data, dispatch):
    props = _base_props(block)
    props["label"] = block.label or block.text or block.content or to_text(block.value) or "Button"
    if block.icon:
        props["icon"] = block.icon
    kind = "BtnSec" if block.type == "BtnSec" else "Btn"
    return RenderedNode(kind, props, children, _click(dispatch, block.action, block.payload))


@_rule("ButtonRow")
def render_button_row(block, children, data, dispatch):
    buttons = [render_button(action, [], data, dispatch) for action in block.actions]
    props = _base_props(block)
    if block.label:
        props["label"] = block.label
    return RenderedNode("ButtonRow", props, buttons + children)


# ============================================================================
# Lists
# ============================================================================


def _item_payload(key: str | None, item: Any, index: int) -> dict[str, Any]:
    payload: dict[str, Any] = {"index": index}
    if key:
        payload["key"] = key
    if isinstance(item, dict) and item.get("id") is not None:
        payload["id"] = item["id"]
    return payload


def _item_handlers(dispatch: Dispatch, payload: dict[str, Any], toggle: bool) -> dict[str, Handler]:
    handlers: dict[str, Handler] = {
        "delete": lambda: dispatch("DELETE_LIST_ITEM", dict(payload)),
        "edit": lambda value: dispatch("EDIT_LIST_ITEM", {**payload, "value": value}),
    }
    if toggle:
        handlers["click"] = lambda: dispatch("TOGGLE_LIST_ITEM", dict(payload))
    return handlers


@_rule("Checklist")
def render_checklist(block, children, data, dispatch):
    key = block.items_key or block.value_key
    items = read_list(data, key)
    rows = []
    for index, item in enumerate(items):
        payload = _item_payload(key, item, index)
        checked = to_bool(item.get("checked")) if isinstance(item, dict) else False
        rows.append(
            RenderedNode(
                "ChecklistItem",
                {"label": item_label(item), "checked": checked, "id": payload.get("id"), "index": index},
                handlers=_item_handlers(dispatch, payload, toggle=True),
            )
        )
    props = _base_props(block)
    props.update(label=block.label or "", count=len(items), empty=not items)
    return RenderedNode("Checklist", props, rows + children)


BADGE_FIELDS = ("category", "type", "status")


@_rule("DataList")
def render_data_list(block, children, data, dispatch):
    key = block.items_key or block.value_key
    items = read_list(data, key)
    rows = []
    for index, item in enumerate(items):
        payload = _item_payload(key, item, index)
        fields = {k: v for k, v in item.items() if k != "id"} if isinstance(item, dict) else {}
        badge = next((to_text(fields[f]) for f in BADGE_FIELDS if fields.get(f) not in (None, "")), None)
        rows.append(
            RenderedNode(
                "DataRow",
                {"label": item_label(item), "badge": badge, "fields": fields, "id": payload.get("id"), "index": index},
                handlers=_item_handlers(dispatch, payload, toggle=False),
            )
        )
    props = _base_props(block)
    props.update(label=block.label or "", count=len(items), empty=not items)
    return RenderedNode("DataList", props, rows + children)


# ============================================================================
# Inputs
# ============================================================================


@_rule("Input")
def render_input(block, children, data, dispatch):
    props = _base_props(block)
    props.update(
        input_id=block.id,
        label=block.label or "",
        placeholder=block.placeholder or "",
        value=to_text(block.value),
    )
    handlers: dict[str, Handler] = {}
    if block.action:
        action, payload = block.action, dict(block.payload)
        handlers["submit"] = lambda value: dispatch(action, {**payload, "value": value})
    return RenderedNode("Input", props, children, handlers)


@_rule("Select")
def render_select(block, children, data, dispatch):
    props = _base_props(block)
    props.update(input_id=block.id, label=block.label or "", options=list(block.options))
    return RenderedNode("Select", props, children)


# ============================================================================
# Fallback
# ============================================================================


def render_fallback(block: Block, children: list[RenderedNode], data: Mapping[str, Any], dispatch: Dispatch) -> RenderedNode:
    """Visible diagnostic for a tag with no rule."""
    tag = block.type or "<missing>"
    return RenderedNode(
        FALLBACK_KIND,
        {"tag": tag, "message": f"Unknown block type: {tag}"},
        children,
    )


BLOCK_REGISTRY: Mapping[str, RenderRule] = MappingProxyType(_RULES)


def get_rule(tag: str) -> RenderRule:
    """Rule for a tag, or the fallback rule."""
    return BLOCK_REGISTRY.get(tag, render_fallback)


def is_registered(tag: str) -> bool:
    return tag in BLOCK_REGISTRY
