"""
Blueprint interpretation
Normalizes, validates and renders generated UI descriptions.
"""

# models must load before registry: the engine imports Archetype from here
from .models import Archetype, Block
from .normalizer import BlueprintNormalizer, canonical_type, normalize_blueprint
from .registry import BLOCK_REGISTRY, FALLBACK_KIND, RenderedNode, get_rule
from .renderer import TreeRenderer, render_blueprint
from .parser import GenerationResult, ResponseParser, parse_response

__all__ = [
    "Archetype",
    "Block",
    "BlueprintNormalizer",
    "canonical_type",
    "normalize_blueprint",
    "BLOCK_REGISTRY",
    "FALLBACK_KIND",
    "RenderedNode",
    "get_rule",
    "TreeRenderer",
    "render_blueprint",
    "GenerationResult",
    "ResponseParser",
    "parse_response",
]
