"""Tree Renderer - walks a normalized blueprint into a RenderedNode tree."""

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from neural_os.core import get_logger
from .models import Block
from .normalizer import normalize_blueprint
from .registry import (
    BLOCK_REGISTRY,
    Dispatch,
    RenderedNode,
    RenderRule,
    render_fallback,
)

logger = get_logger(__name__)


def _child_nodes(node: dict[str, Any]) -> list[dict[str, Any]]:
    children = node.get("children")
    if not isinstance(children, list):
        return []
    return [child for child in children if isinstance(child, dict)]


def _ignore(action: str, payload: dict[str, Any]) -> None:
    logger.debug("dispatch_ignored", action=action)


class TreeRenderer:
    """
    Renders blueprints synchronously in a single pass.

    Children render in array order. Tags without a rule render as a
    Fallback node; the rest of the tree is unaffected.
    """

    def __init__(self, registry: Mapping[str, RenderRule] = BLOCK_REGISTRY) -> None:
        self.registry = registry

    def render(
        self,
        blueprint: Any,
        data: Mapping[str, Any] | None = None,
        dispatch: Dispatch | None = None,
    ) -> RenderedNode:
        """
        Render a whole blueprint.

        Args:
            blueprint: Raw or normalized blueprint
            data: Current data bag
            dispatch: Called with (action, payload) when the user interacts

        Returns:
            Root "App" node whose children are the top-level blocks
        """
        data = data or {}
        dispatch = dispatch or _ignore

        children = self._render_nodes(normalize_blueprint(blueprint), data, dispatch)
        return RenderedNode("App", {"empty": not children}, children)

    def render_node(self, node: dict[str, Any], data: Mapping[str, Any], dispatch: Dispatch) -> RenderedNode:
        """Render one normalized node dict and its subtree."""
        return self._render_nodes([node], data, dispatch)[0]

    def _render_nodes(
        self,
        nodes: list[dict[str, Any]],
        data: Mapping[str, Any],
        dispatch: Dispatch,
    ) -> list[RenderedNode]:
        """Post-order walk with an explicit stack; children render before their parent."""
        rendered: list[RenderedNode] = []
        # Frames of (node, remaining children, rendered children); the first frame is the list itself
        frames: list[tuple[dict[str, Any] | None, Iterator[dict[str, Any]], list[RenderedNode]]] = [
            (None, iter(nodes), rendered)
        ]
        while frames:
            node, remaining, children = frames[-1]
            child = next(remaining, None)
            if child is not None:
                frames.append((child, iter(_child_nodes(child)), []))
                continue
            frames.pop()
            if node is not None:
                frames[-1][2].append(self._render_one(node, children, data, dispatch))
        return rendered

    def _render_one(
        self,
        node: dict[str, Any],
        children: list[RenderedNode],
        data: Mapping[str, Any],
        dispatch: Dispatch,
    ) -> RenderedNode:
        # Validate one level at a time so depth is bounded only by the tree itself
        try:
            block = Block.model_validate({k: v for k, v in node.items() if k != "children"})
        except PydanticValidationError as e:
            logger.warning("block_invalid", tag=node.get("type"), error=str(e))
            return render_fallback(Block(type=str(node.get("type") or "")), children, data, dispatch)
        return self.render_block(block, children, data, dispatch)

    def render_block(
        self,
        block: Block,
        children: list[RenderedNode],
        data: Mapping[str, Any],
        dispatch: Dispatch,
    ) -> RenderedNode:
        """Apply the rule for a validated block to its rendered children."""
        rule = self.registry.get(block.type)
        if rule is None:
            logger.warning("unknown_block_type", tag=block.type)
            return render_fallback(block, children, data, dispatch)
        return rule(block, children, data, dispatch)


_renderer = TreeRenderer()


def render_blueprint(
    blueprint: Any,
    data: Mapping[str, Any] | None = None,
    dispatch: Dispatch | None = None,
) -> RenderedNode:
    """Convenience function to render with the default registry."""
    return _renderer.render(blueprint, data, dispatch)
