"""String-to-typed-value coercion for bound step arguments.

A declared parameter type is first resolved to a ``TargetKind``. Kinds are
tried in a fixed priority order (text, boolean, byte, short, int, long,
float, double). In ``assignable`` mode the first kind whose Python type is
a subclass of the declared type wins, which means broad declared types such
as ``object`` or ``typing.Any`` always receive the raw string. ``exact``
mode only accepts declared types that map to a kind directly.
"""

import logging
import math
import re
import struct
import types
from collections.abc import Callable
from enum import Enum
from typing import Any, Literal, NewType, Union, get_args, get_origin

logger = logging.getLogger(__name__)

CoercionMode = Literal["assignable", "exact"]

# Sized aliases for annotating step-definition parameters.
Byte = NewType("Byte", int)
Short = NewType("Short", int)
Int = NewType("Int", int)
Long = NewType("Long", int)
Float = NewType("Float", float)
Double = NewType("Double", float)

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


class TargetKind(Enum):
    """Supported coercion targets, declared in priority order."""

    TEXT = "text"
    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"

    @property
    def python_type(self) -> type:
        """The Python type values of this kind are produced as."""
        return _PYTHON_TYPES[self]


_PYTHON_TYPES: dict[TargetKind, type] = {
    TargetKind.TEXT: str,
    TargetKind.BOOLEAN: bool,
    TargetKind.BYTE: int,
    TargetKind.SHORT: int,
    TargetKind.INT: int,
    TargetKind.LONG: int,
    TargetKind.FLOAT: float,
    TargetKind.DOUBLE: float,
}

_DIRECT_KINDS: dict[Any, TargetKind] = {
    str: TargetKind.TEXT,
    bool: TargetKind.BOOLEAN,
    Byte: TargetKind.BYTE,
    Short: TargetKind.SHORT,
    Int: TargetKind.INT,
    Long: TargetKind.LONG,
    int: TargetKind.LONG,
    Float: TargetKind.FLOAT,
    Double: TargetKind.DOUBLE,
    float: TargetKind.DOUBLE,
}

_INTEGER_BITS: dict[TargetKind, int] = {
    TargetKind.BYTE: 8,
    TargetKind.SHORT: 16,
    TargetKind.INT: 32,
    TargetKind.LONG: 64,
}


def _unwrap_optional(declared_type: Any) -> Any:
    origin = get_origin(declared_type)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(declared_type) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return declared_type


def resolve_target_kind(
    declared_type: Any, mode: CoercionMode = "assignable"
) -> TargetKind | None:
    """Resolve a declared parameter type to the kind it is coerced to.

    Returns None when the declared type is not supported.
    """
    if isinstance(declared_type, TargetKind):
        return declared_type

    declared_type = _unwrap_optional(declared_type)
    try:
        direct = _DIRECT_KINDS.get(declared_type)
    except TypeError:
        # Unhashable annotation objects are never supported.
        return None
    if direct is not None:
        return direct

    if mode == "exact":
        return None

    if declared_type is Any:
        return TargetKind.TEXT
    if not isinstance(declared_type, type):
        return None
    for kind in TargetKind:
        try:
            if issubclass(kind.python_type, declared_type):
                return kind
        except TypeError:
            # Parameterized generics cannot be used with issubclass().
            return None
    return None


def _parse_boolean(raw: str) -> bool:
    return raw.lower() == "true"


def _parse_integer(raw: str, bits: int) -> int | None:
    if not _INTEGER_TEXT.fullmatch(raw):
        return None
    value = int(raw)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        return None
    return value


def _parse_double(raw: str) -> float | None:
    try:
        return float(raw)
    except ValueError:
        return None


def _parse_float(raw: str) -> float | None:
    value = _parse_double(raw)
    if value is None or math.isnan(value) or math.isinf(value):
        return value
    try:
        packed = struct.pack("f", value)
    except OverflowError:
        return math.copysign(math.inf, value)
    single: float = struct.unpack("f", packed)[0]
    return single


_PARSERS: dict[TargetKind, Callable[[str], Any]] = {
    TargetKind.TEXT: lambda raw: raw,
    TargetKind.BOOLEAN: _parse_boolean,
    TargetKind.BYTE: lambda raw: _parse_integer(raw, 8),
    TargetKind.SHORT: lambda raw: _parse_integer(raw, 16),
    TargetKind.INT: lambda raw: _parse_integer(raw, 32),
    TargetKind.LONG: lambda raw: _parse_integer(raw, 64),
    TargetKind.FLOAT: _parse_float,
    TargetKind.DOUBLE: _parse_double,
}


def parse_as(kind: TargetKind, raw: str | None) -> Any:
    """Parse ``raw`` as a value of ``kind``, returning None if it does not parse."""
    if raw is None:
        return None
    return _PARSERS[kind](raw)


def coerce_value(
    declared_type: Any, raw: str | None, mode: CoercionMode = "assignable"
) -> Any:
    """Convert a raw step string into a value typed after ``declared_type``.

    Args:
        declared_type: The parameter's declared type, a sized alias or a
            ``TargetKind``
        raw: The raw string extracted from the step, or None
        mode: ``assignable`` (supertype matching) or ``exact``

    Returns:
        The coerced value, or None when the raw value is missing, does not
        parse, or the declared type is unsupported
    """
    if raw is None:
        return None

    kind = resolve_target_kind(declared_type, mode)
    if kind is None:
        logger.debug("No coercion rule for declared type %r", declared_type)
        return None

    value = parse_as(kind, raw)
    if value is None:
        logger.debug("Could not parse %r as %s", raw, kind.value)
    return value
