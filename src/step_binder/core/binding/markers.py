"""Per-parameter binding markers.

Markers are attached to step-definition parameters with ``typing.Annotated``::

    @given("I have <count> items")
    def have_items(count: Annotated[int, Assigned("count")]) -> None: ...

A parameter carries at most one effective marker. When several are present
the precedence is Projection, then Group, then Assigned.
"""

from dataclasses import dataclass

from step_binder.exceptions import BindingDefinitionError


@dataclass(frozen=True)
class NoBinding:
    """The parameter is not bound from the step and always receives None."""


@dataclass(frozen=True)
class Projection:
    """Bind from the projection (example table) value named ``name``.

    Only applies when ``<name>`` appears literally in the step text.
    """

    name: str


@dataclass(frozen=True)
class Group:
    """Bind from capture group ``index`` of the declared pattern.

    Index 0 is the whole matched step text.
    """

    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise BindingDefinitionError(f"Group index must be >= 0, got {self.index}")


@dataclass(frozen=True)
class Assigned:
    """Bind from the value captured where ``<name>`` sits in the declared pattern."""

    name: str


Binding = NoBinding | Projection | Group | Assigned

MARKER_PRECEDENCE: tuple[type, ...] = (Projection, Group, Assigned)

NO_BINDING = NoBinding()


def _precedence(marker: Binding) -> int:
    return next(
        rank
        for rank, marker_type in enumerate(MARKER_PRECEDENCE)
        if isinstance(marker, marker_type)
    )


def select_binding(markers: list[object], strict: bool = False) -> Binding:
    """Pick the effective binding among the markers found on one parameter.

    Args:
        markers: Metadata objects attached to the parameter; anything that
            is not a binding marker is ignored
        strict: Reject parameters carrying more than one marker

    Returns:
        The highest-precedence marker, or NO_BINDING

    Raises:
        BindingDefinitionError: In strict mode, if several markers are present
    """
    found: list[Binding] = [
        m for m in markers if isinstance(m, (Projection, Group, Assigned))
    ]
    if not found:
        return NO_BINDING
    if strict and len(found) > 1:
        msg = "a parameter may carry at most one binding marker, got " + ", ".join(
            repr(m) for m in found
        )
        raise BindingDefinitionError(msg)
    return min(found, key=_precedence)
