"""Given/When/Then decorators that declare a step pattern on a callable."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

STEP_DEFINITION_ATTR = "__step_definition__"


@dataclass(frozen=True)
class StepDefinition:
    """The step kind and declared pattern attached to a step-definition."""

    kind: str
    pattern: str


def step(kind: str, pattern: str) -> Callable[[F], F]:
    """Attach a ``StepDefinition`` to the decorated callable, leaving it unchanged."""

    def decorator(func: F) -> F:
        setattr(func, STEP_DEFINITION_ATTR, StepDefinition(kind, pattern))
        return func

    return decorator


def given(pattern: str) -> Callable[[F], F]:
    return step("Given", pattern)


def when(pattern: str) -> Callable[[F], F]:
    return step("When", pattern)


def then(pattern: str) -> Callable[[F], F]:
    return step("Then", pattern)


def step_definition_of(method: Callable[..., Any]) -> StepDefinition | None:
    """Return the step definition declared on ``method``, if any."""
    definition = getattr(method, STEP_DEFINITION_ATTR, None)
    if isinstance(definition, StepDefinition):
        return definition
    return None
