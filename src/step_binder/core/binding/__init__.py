"""Step binding components."""

from step_binder.core.binding.binder import bind_arguments, resolve_raw_value
from step_binder.core.binding.coercion import (
    Byte,
    Double,
    Float,
    Int,
    Long,
    Short,
    TargetKind,
    coerce_value,
    resolve_target_kind,
)
from step_binder.core.binding.engine import BindingEngine, build_binding
from step_binder.core.binding.groups import (
    PatternCache,
    extract_assigned_values,
    extract_groups,
)
from step_binder.core.binding.introspection import ParameterSpec, describe_parameters
from step_binder.core.binding.markers import Assigned, Group, NoBinding, Projection
from step_binder.core.binding.placeholders import extract_placeholders
from step_binder.core.binding.result_types import BindingResult
from step_binder.core.binding.step_definitions import (
    StepDefinition,
    given,
    step_definition_of,
    then,
    when,
)

__all__ = [
    "Assigned",
    "BindingEngine",
    "BindingResult",
    "Byte",
    "Double",
    "Float",
    "Group",
    "Int",
    "Long",
    "NoBinding",
    "ParameterSpec",
    "PatternCache",
    "Projection",
    "Short",
    "StepDefinition",
    "TargetKind",
    "bind_arguments",
    "build_binding",
    "coerce_value",
    "describe_parameters",
    "extract_assigned_values",
    "extract_groups",
    "extract_placeholders",
    "given",
    "resolve_raw_value",
    "resolve_target_kind",
    "step_definition_of",
    "then",
    "when",
]
