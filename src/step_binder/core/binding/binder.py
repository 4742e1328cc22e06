"""Resolve one argument per step-definition parameter."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from step_binder.core.binding.coercion import CoercionMode, coerce_value
from step_binder.core.binding.introspection import ParameterSpec
from step_binder.core.binding.markers import Assigned, Binding, Group, Projection

logger = logging.getLogger(__name__)


def resolve_raw_value(
    binding: Binding,
    projections: Sequence[str],
    projection_values: Mapping[str, str] | None,
    assignments: Sequence[str],
    assignment_values: Sequence[str | None],
    groups: Sequence[str | None],
) -> str | None:
    """Return the raw string a single binding marker resolves to.

    Unknown names and out-of-range indices resolve to None.
    """
    if isinstance(binding, Projection):
        if binding.name in projections and projection_values is not None:
            return projection_values.get(binding.name)
    elif isinstance(binding, Group):
        if len(groups) > binding.index:
            return groups[binding.index]
    elif isinstance(binding, Assigned):
        if binding.name in assignments:
            # Index 0 of the captures is the whole match.
            position = assignments.index(binding.name) + 1
            if position < len(assignment_values):
                return assignment_values[position]
    return None


def bind_arguments(
    parameters: Sequence[ParameterSpec],
    projections: Sequence[str],
    projection_values: Mapping[str, str] | None,
    assignments: Sequence[str],
    assignment_values: Sequence[str | None],
    groups: Sequence[str | None],
    mode: CoercionMode = "assignable",
) -> list[Any]:
    """Build the typed argument list for a step-definition call.

    Args:
        parameters: Declared parameters of the step-definition callable
        projections: Placeholder names found in the step text
        projection_values: Example values keyed by placeholder name
        assignments: Placeholder names found in the declared pattern
        assignment_values: Captures of the placeholder-substituted pattern
        groups: Captures of the verbatim declared pattern
        mode: Coercion mode passed to the value coercer

    Returns:
        One value per parameter; slots that cannot be resolved are None
    """
    if not projection_values and not assignment_values and not groups:
        return [None] * len(parameters)

    arguments: list[Any] = []
    for spec in parameters:
        raw = resolve_raw_value(
            spec.binding,
            projections,
            projection_values,
            assignments,
            assignment_values,
            groups,
        )
        if raw is None:
            logger.debug("Parameter %r left unbound (%r)", spec.name, spec.binding)
            arguments.append(None)
            continue
        arguments.append(coerce_value(spec.declared_type, raw, mode))
    return arguments
