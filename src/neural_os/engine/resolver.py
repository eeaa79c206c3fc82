"""Self-healing key resolution.

Generated blueprints often reference data keys that the generated data bag
does not contain (or contains under another name). Resolution order:

1. The requested key, if the bag has it.
2. With no key requested, the first entry whose kind matches.
3. Otherwise the requested key (or the operation's conventional key), which
   the caller creates with a type default.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from neural_os.core import get_logger
from .values import ValueKind, default_for, kind_of

logger = get_logger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a target key."""

    key: str
    requested: str | None
    exists: bool

    @property
    def healed(self) -> bool:
        """True when the bag did not hold the requested key as-is."""
        return self.requested != self.key or not self.exists


def requested_key(payload: Mapping[str, Any]) -> str | None:
    """Target key named by a payload, if any."""
    key = payload.get("key")
    if key is None or isinstance(key, (dict, list)):
        return None
    key = str(key).strip()
    return key or None


def find_key_of_kind(
    data: Mapping[str, Any], kind: ValueKind, exclude: Iterable[str] = ()
) -> str | None:
    """First key (in insertion order) whose value has the given kind."""
    skipped = set(exclude)
    for key, value in data.items():
        if key not in skipped and kind_of(value) == kind:
            return key
    return None


def resolve_key(
    data: Mapping[str, Any],
    requested: str | None,
    kind: ValueKind,
    fallback: str,
) -> Resolution:
    """
    Resolve the key an operation should act on, without modifying data.

    Args:
        data: Current data bag
        requested: Key named by the payload, or None
        kind: Kind the operation works on
        fallback: Conventional key when nothing is requested or found

    Returns:
        Resolution naming the key and whether it already exists
    """
    if requested is not None:
        return Resolution(key=requested, requested=requested, exists=requested in data)

    found = find_key_of_kind(data, kind)
    if found is not None:
        return Resolution(key=found, requested=None, exists=True)

    return Resolution(key=fallback, requested=None, exists=fallback in data)


def heal(data: dict[str, Any], requested: str | None, kind: ValueKind, fallback: str) -> str:
    """
    Resolve a key and create it with a type default if absent.

    Mutates ``data``; callers pass their working copy.

    Returns:
        The resolved key, guaranteed present in data
    """
    resolution = resolve_key(data, requested, kind, fallback)

    if not resolution.exists:
        data[resolution.key] = default_for(kind)
        logger.warning(
            "self_healing_created",
            key=resolution.key,
            requested=requested,
            kind=kind.value,
        )
    elif resolution.healed:
        logger.info("self_healing_resolved", key=resolution.key, kind=kind.value)

    return resolution.key
