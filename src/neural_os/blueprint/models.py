"""Blueprint Data Models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Archetype(str, Enum):
    """Behavioral pattern of a micro-app."""

    ACCUMULATOR = "Accumulator"  # counters, scores, trackers
    REGULATOR = "Regulator"      # timers
    CHECKLIST = "Checklist"      # todos, packing lists
    DRAFTER = "Drafter"          # freeform text and ledgers

    @classmethod
    def parse(cls, value: Any) -> "Archetype | None":
        """Case-insensitive lookup; unknown values become None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        lowered = value.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return None


class Block(BaseModel):
    """
    One visual unit of a blueprint.

    Properties are lenient: scalars are stringified where text is expected,
    malformed payloads become empty mappings, and anything the model does not
    name is kept as an extra field.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(default="", description="Block type tag")
    id: str | None = Field(default=None, description="Identifier (required for inputs)")
    label: str | None = None
    text: str | None = None
    content: str | None = None
    value: Any = None
    icon: str | None = None
    variant: str | None = None
    style: str | None = None
    placeholder: str | None = None
    src: str | None = None

    # Data bindings
    value_key: str | None = None
    items_key: str | None = None
    state_key: str | None = None

    # Interaction
    action: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    options: list[str] = Field(default_factory=list)
    actions: list["Block"] = Field(default_factory=list)

    children: list["Block"] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator(
        "id", "label", "text", "content", "icon", "variant", "style", "placeholder", "src",
        "value_key", "items_key", "state_key", "action",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)

    @field_validator("payload", mode="before")
    @classmethod
    def coerce_payload(cls, v: Any) -> dict[str, Any]:
        return v if isinstance(v, dict) else {}

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [text for text in (_as_text(o) for o in v) if text is not None]

    @field_validator("actions", "children", mode="before")
    @classmethod
    def drop_non_blocks(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [child for child in v if isinstance(child, (dict, Block))]

    @property
    def display_text(self) -> str:
        """Best available human-readable text for this block."""
        return self.text or self.content or self.label or ""


Block.model_rebuild()
