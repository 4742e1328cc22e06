"""Describe a step-definition callable's parameters and binding markers."""

import inspect
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin

from step_binder.core.binding.markers import NO_BINDING, Binding, select_binding
from step_binder.exceptions import BindingDefinitionError

_RECEIVER_NAMES = ("self", "cls")
_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class ParameterSpec:
    """One declared parameter of a step-definition callable."""

    name: str
    declared_type: Any
    binding: Binding = NO_BINDING


def _split_annotated(annotation: Any) -> tuple[Any, list[object]]:
    """Separate an ``Annotated[T, ...]`` hint into ``T`` and its metadata."""
    if get_origin(annotation) is Annotated:
        declared, *metadata = get_args(annotation)
        return declared, list(metadata)
    return annotation, []


def describe_parameters(
    method: Callable[..., Any], strict: bool = False
) -> list[ParameterSpec]:
    """List the parameters of ``method`` in declaration order.

    A leading ``self``/``cls`` of an unbound function is skipped, as are
    ``*args`` and ``**kwargs``. Unannotated parameters are typed ``Any``.

    Args:
        method: The step-definition callable
        strict: Reject parameters carrying more than one binding marker

    Raises:
        BindingDefinitionError: If the signature or its hints cannot be read
    """
    try:
        signature = inspect.signature(method)
        hints = typing.get_type_hints(method, include_extras=True)
    except (TypeError, ValueError, NameError) as e:
        raise BindingDefinitionError(
            f"Cannot describe parameters of {method!r}: {e}"
        ) from e

    parameters = list(signature.parameters.values())
    if (
        parameters
        and parameters[0].name in _RECEIVER_NAMES
        and not inspect.ismethod(method)
    ):
        parameters = parameters[1:]

    specs = []
    for parameter in parameters:
        if parameter.kind in _SKIPPED_KINDS:
            continue
        declared, metadata = _split_annotated(hints.get(parameter.name, Any))
        specs.append(
            ParameterSpec(
                name=parameter.name,
                declared_type=declared,
                binding=select_binding(metadata, strict=strict),
            )
        )
    return specs
