"""Blueprint Normalizer - canonicalizes generated UI trees before rendering."""

import copy
from typing import Any

from neural_os.core import get_logger

logger = get_logger(__name__)


# Canonical tags, keyed by folded name (lower-case, no separators)
TYPE_SYNONYMS: dict[str, str] = {
    # Containers
    "card": "Card",
    "container": "Card",
    "div": "Card",
    "section": "Card",
    "col": "Card",
    "column": "Card",
    "stack": "Card",
    "group": "Card",
    "row": "Row",
    "hstack": "Row",
    # Text
    "h1": "H1",
    "h2": "H1",
    "heading": "H1",
    "header": "H1",
    "title": "H1",
    "text": "Text",
    "paragraph": "Text",
    "p": "Text",
    "span": "Text",
    "label": "Text",
    "lbl": "Text",
    "body": "Text",
    # Numbers
    "stat": "Stat",
    "metric": "Stat",
    "counter": "Stat",
    "display": "Stat",
    "number": "Stat",
    # Buttons
    "btn": "Btn",
    "button": "Btn",
    "primarybutton": "Btn",
    "btnsec": "BtnSec",
    "secondarybutton": "BtnSec",
    "buttonrow": "ButtonRow",
    "buttonlist": "ButtonRow",
    "buttons": "ButtonRow",
    "btnrow": "ButtonRow",
    "btns": "ButtonRow",
    # State
    "toggle": "Toggle",
    "switch": "Toggle",
    "checkbox": "Toggle",
    "timer": "Timer",
    "countdown": "Timer",
    # Lists
    "checklist": "Checklist",
    "todolist": "Checklist",
    "todo": "Checklist",
    "datalist": "DataList",
    "list": "DataList",
    "log": "DataList",
    "ledger": "DataList",
    "table": "DataList",
    # Inputs
    "input": "Input",
    "textinput": "Input",
    "textfield": "Input",
    "textarea": "Input",
    "select": "Select",
    "dropdown": "Select",
    # Media
    "icon": "Icon",
    "img": "Image",
    "image": "Image",
}

TEXT_TAGS = frozenset({"Text", "H1"})
LIST_TAGS = frozenset({"Checklist", "DataList"})

# Compact node encoding: {t: tag, p: {...}, c: [...]}
COMPACT_PROPS: dict[str, str] = {
    "s": "style",
    "x": "text",
    "k": "action",
    "n": "icon",
    "h": "placeholder",
    "v": "value",
    "src": "src",
}

ACTION_ALIASES = ("buttons", "btns")

# Fields holding nested nodes; these are walked, never deep-copied
NODE_FIELDS = frozenset({"children", "c", "actions", *ACTION_ALIASES})


def canonical_type(tag: Any) -> Any:
    """Fold a type name onto its canonical tag; unknown names pass through."""
    if not isinstance(tag, str):
        return tag
    folded = tag.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
    return TYPE_SYNONYMS.get(folded, tag)


class BlueprintNormalizer:
    """
    Rewrites raw blueprints into the flat canonical block shape.

    Canonical block: {"type": <tag>, <properties>..., "children": [...]}

    Handles:
    - Bare strings -> Text blocks
    - Compact nodes {t, p, c} and nested {"props": {...}} objects
    - {"on_event": {"click": action}} handlers
    - Synonym folding of type names
    - text/content mirroring and buttons/btns -> actions aliasing

    Normalizing an already-normalized tree returns an equal tree, and the
    caller's object is never mutated.
    """

    def normalize(self, blueprint: Any) -> list[dict[str, Any]]:
        """
        Normalize a blueprint.

        Args:
            blueprint: List of nodes, a single node, or {"root": node}

        Returns:
            List of canonical block dicts
        """
        if blueprint is None:
            return []
        if isinstance(blueprint, dict):
            if "root" in blueprint and len(blueprint) == 1:
                nodes = [blueprint["root"]]
            else:
                nodes = [blueprint]
        elif isinstance(blueprint, list):
            nodes = blueprint
        else:
            nodes = [blueprint]

        result: list[dict[str, Any]] = []
        # Work list of (raw nodes, output list, default type); the tree is
        # walked without recursion so depth is not limited by the stack
        pending: list[tuple[list[Any], list[dict[str, Any]], str | None]] = [(nodes, result, None)]
        while pending:
            raw_nodes, out, default_type = pending.pop()
            for node in raw_nodes:
                normalized = self._normalize_node(node, default_type, pending)
                if normalized is not None:
                    out.append(normalized)
        return result

    @staticmethod
    def _defer(nodes: list[Any], pending: list, default_type: str | None = None) -> list[dict[str, Any]]:
        """Queue a raw node list and return the list its results will fill."""
        out: list[dict[str, Any]] = []
        pending.append((nodes, out, default_type))
        return out

    def _normalize_node(self, node: Any, default_type: str | None, pending: list) -> dict[str, Any] | None:
        if isinstance(node, str):
            return {"type": "Text", "text": node, "content": node}
        if isinstance(node, (int, float, bool)):
            text = str(node)
            return {"type": "Text", "text": text, "content": text}
        if isinstance(node, list):
            return {"type": "Card", "children": self._defer(node, pending)}
        if not isinstance(node, dict):
            logger.warning("blueprint_node_dropped", node_type=type(node).__name__)
            return None

        block = self._flatten(node)

        children = block.get("children")
        if children is not None:
            if not isinstance(children, list):
                children = [children]
            block["children"] = self._defer(children, pending)

        tag = block.get("type")
        if tag is None and default_type is not None:
            tag = default_type
        if tag is not None:
            block["type"] = canonical_type(tag)

        self._alias_properties(block, pending)
        return block

    def _flatten(self, node: dict[str, Any]) -> dict[str, Any]:
        """Expand compact and nested-props encodings into one flat dict.

        Property values are copied here; node lists are left for the walk.
        """
        block = {
            key: value if key in NODE_FIELDS else copy.deepcopy(value)
            for key, value in node.items()
        }

        if "type" not in block:
            for alias in ("t", "component", "kind"):
                if alias in block:
                    block["type"] = block.pop(alias)
                    break

        compact = block.pop("p", None)
        if isinstance(compact, dict):
            for short, name in COMPACT_PROPS.items():
                if short in compact and name not in block:
                    block[name] = compact[short]

        if "c" in block and "children" not in block:
            block["children"] = block.pop("c")
        elif "c" in block:
            block["c"] = copy.deepcopy(block["c"])

        props = block.pop("props", None)
        if isinstance(props, dict):
            for key, value in props.items():
                block.setdefault(key, value)

        on_event = block.pop("on_event", None)
        if isinstance(on_event, dict) and "action" not in block:
            click = on_event.get("click") or on_event.get("submit")
            if click is not None:
                block["action"] = click

        if "data_key" in block and "value_key" not in block:
            block["value_key"] = block["data_key"]

        return block

    def _alias_properties(self, block: dict[str, Any], pending: list) -> None:
        tag = block.get("type")

        if "text" in block and "content" not in block:
            block["content"] = block["text"]
        elif "content" in block and "text" not in block:
            block["text"] = block["content"]
        elif tag in TEXT_TAGS and "text" not in block and "label" in block:
            block["text"] = block["label"]
            block["content"] = block["label"]

        if "actions" not in block:
            for alias in ACTION_ALIASES:
                if isinstance(block.get(alias), list):
                    block["actions"] = block.pop(alias)
                    break
        for name in ("actions", *ACTION_ALIASES):
            if name not in block:
                continue
            if name == "actions" and isinstance(block[name], list):
                block[name] = self._defer(block[name], pending, default_type="Btn")
            else:
                block[name] = copy.deepcopy(block[name])

        if tag in LIST_TAGS and "items_key" not in block and "value_key" in block:
            block["items_key"] = block["value_key"]
        if tag == "Toggle" and "state_key" not in block and "value_key" in block:
            block["state_key"] = block["value_key"]


_normalizer = BlueprintNormalizer()


def normalize_blueprint(blueprint: Any) -> list[dict[str, Any]]:
    """
    Convenience function to normalize a blueprint.

    Args:
        blueprint: Raw blueprint as decoded from a model response

    Returns:
        List of canonical block dicts
    """
    return _normalizer.normalize(blueprint)
