"""Pydantic configuration model for the binding engine."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class BindingConfig(BaseModel):
    """Engine settings, loaded from ``.step-binder.yaml``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # "exact" only coerces declared types that map to a kind directly.
    coercion_mode: Literal["assignable", "exact"] = "assignable"
    strict_markers: bool = False
    pattern_cache_size: int = Field(default=256, ge=0)
