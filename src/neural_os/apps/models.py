"""App record."""

import time
from typing import Any

from pydantic import BaseModel, Field, field_validator

from neural_os.blueprint.models import Archetype
from neural_os.core.id import new_app_id


class App(BaseModel):
    """A persisted micro-app: a blueprint plus the data it renders."""

    id: str = Field(default_factory=new_app_id, description="Stable for the app's lifetime")
    title: str = Field(..., description="Display name")
    archetype: Archetype | None = Field(default=None)
    blueprint: list[dict[str, Any]] = Field(default_factory=list, description="Normalized blocks")
    data: dict[str, Any] = Field(default_factory=dict, description="Data bag")
    created_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        # Older stores used millisecond timestamps as ids
        return str(v) if isinstance(v, int) else v

    @field_validator("archetype", mode="before")
    @classmethod
    def coerce_archetype(cls, v: Any) -> Archetype | None:
        return Archetype.parse(v)
