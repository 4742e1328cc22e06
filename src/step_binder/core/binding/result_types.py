"""Typed result model for a bound step."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class BindingResult:
    """A step bound to its step-definition callable.

    Constructed once by BindingEngine.build(), read by the step invoker
    to perform the call with ``arguments``.
    """

    step: str
    method: Callable[..., Any] = field(repr=False)
    projections: tuple[str, ...] = ()
    arguments: tuple[Any, ...] = ()

    @property
    def has_projections(self) -> bool:
        """Whether the step text references any ``<name>`` placeholders."""
        return bool(self.projections)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict, rendering the method by qualified name."""
        return {
            "step": self.step,
            "method": getattr(self.method, "__qualname__", repr(self.method)),
            "projections": list(self.projections),
            "arguments": list(self.arguments),
        }
