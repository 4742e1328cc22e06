"""Parse ``--param`` options into a synthetic step-definition callable."""

import inspect
from collections.abc import Callable
from typing import Annotated, Any

import click

from step_binder.core.binding.coercion import Byte, Double, Float, Int, Long, Short
from step_binder.core.binding.markers import Assigned, Group, Projection
from step_binder.exceptions import BindingDefinitionError

PARAM_TYPES: dict[str, Any] = {
    "str": str,
    "bool": bool,
    "byte": Byte,
    "short": Short,
    "int": Int,
    "long": Long,
    "float": Float,
    "double": Double,
    "any": Any,
}

MARKER_NAMES = ("projection", "group", "assigned")


def _bad_param(message: str) -> click.BadParameter:
    return click.BadParameter(message, param_hint="--param")


def _parse_marker(marker: str, value: str) -> Projection | Group | Assigned:
    if marker == "projection":
        return Projection(value)
    if marker == "assigned":
        return Assigned(value)
    try:
        return Group(int(value))
    except ValueError as e:
        raise _bad_param(f"group index must be an integer, got {value!r}") from e
    except BindingDefinitionError as e:
        raise _bad_param(str(e)) from e


def parse_param(text: str) -> tuple[str, Any]:
    """Parse ``NAME:TYPE[:MARKER=VALUE]`` into a name and its annotation.

    >>> parse_param("count:int:assigned=count")[0]
    'count'
    """
    parts = text.split(":", 2)
    if len(parts) < 2 or not parts[0]:
        raise _bad_param(f"expected NAME:TYPE[:MARKER=VALUE], got {text!r}")

    name, type_name = parts[0], parts[1].lower()
    if type_name not in PARAM_TYPES:
        choices = ", ".join(PARAM_TYPES)
        raise _bad_param(f"unknown type {type_name!r} (choose from {choices})")
    declared = PARAM_TYPES[type_name]

    if len(parts) == 2:
        return name, declared

    marker, sep, value = parts[2].partition("=")
    marker = marker.lower()
    if not sep or marker not in MARKER_NAMES:
        raise _bad_param(
            f"expected MARKER=VALUE with MARKER in {', '.join(MARKER_NAMES)}, "
            f"got {parts[2]!r}"
        )
    return name, Annotated[declared, _parse_marker(marker, value)]


def build_step_callable(params: list[str]) -> Callable[..., Any]:
    """Build a callable whose signature carries the parsed parameters."""
    annotations: dict[str, Any] = {}
    parameters = []
    for text in params:
        name, annotation = parse_param(text)
        if name in annotations:
            raise _bad_param(f"duplicate parameter {name!r}")
        if not name.isidentifier():
            raise _bad_param(f"{name!r} is not a valid parameter name")
        annotations[name] = annotation
        parameters.append(
            inspect.Parameter(
                name, inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=annotation
            )
        )

    def cli_step(*args: Any) -> None:
        """Stand-in for a step definition described on the command line."""

    cli_step.__signature__ = inspect.Signature(parameters)  # type: ignore[attr-defined]
    cli_step.__annotations__ = annotations
    return cli_step
