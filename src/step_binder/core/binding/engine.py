"""Binding engine: the entry point that turns a step into call arguments."""

import inspect
import logging
import threading
import weakref
from collections.abc import Callable, Mapping
from typing import Any

from step_binder.core.binding.binder import bind_arguments
from step_binder.core.binding.groups import (
    PatternCache,
    extract_assigned_values,
    extract_groups,
)
from step_binder.core.binding.introspection import ParameterSpec, describe_parameters
from step_binder.core.binding.placeholders import extract_placeholders
from step_binder.core.binding.result_types import BindingResult
from step_binder.core.binding.step_definitions import step_definition_of
from step_binder.exceptions import BindingDefinitionError
from step_binder.schemas.binding_config import BindingConfig

logger = logging.getLogger(__name__)


class BindingEngine:
    """Binds step text to the typed arguments of a step-definition callable.

    The engine owns a compiled-pattern cache and a per-callable parameter
    cache. Both are safe to share between threads. The parameter cache is
    keyed weakly on the underlying function, so bound methods share one
    entry and neither functions nor step-library instances are kept alive.
    """

    def __init__(self, config: BindingConfig | None = None) -> None:
        """Initialize the engine.

        Args:
            config: Binding configuration; defaults are used when omitted
        """
        self.config = config or BindingConfig()
        self._patterns = PatternCache(self.config.pattern_cache_size)
        self._parameters: weakref.WeakKeyDictionary[
            Callable[..., Any], dict[bool, list[ParameterSpec]]
        ] = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

    def parameters_of(self, method: Callable[..., Any]) -> list[ParameterSpec]:
        """Describe ``method``'s parameters, caching the result.

        Callables that cannot be weakly referenced or hashed are described on
        every call.
        """
        function = getattr(method, "__func__", method)
        bound = inspect.ismethod(method)
        try:
            with self._lock:
                cached = self._parameters.get(function, {}).get(bound)
        except TypeError:
            logger.debug("Not caching parameters of %r", method)
            return describe_parameters(method, strict=self.config.strict_markers)
        if cached is not None:
            return cached

        specs = describe_parameters(method, strict=self.config.strict_markers)
        with self._lock:
            self._parameters.setdefault(function, {})[bound] = specs
        return specs

    def build(
        self,
        kind: str,
        step: str | None,
        method: Callable[..., Any],
        projection_values: Mapping[str, str] | None,
        pattern: str | None,
    ) -> BindingResult:
        """Bind a step to ``method``.

        Args:
            kind: Step keyword, e.g. "Given"
            step: Literal step text, or None for a step without text
            method: Step-definition callable
            projection_values: Example values keyed by placeholder name
            pattern: Pattern declared on the step definition

        Returns:
            The immutable binding result

        Raises:
            PatternCompilationError: If ``pattern`` is not a valid regex
            BindingDefinitionError: If ``method``'s markers are invalid
        """
        projections = extract_placeholders(step)
        assignments = extract_placeholders(pattern)
        assignment_values = extract_assigned_values(step, pattern, self._patterns)
        groups = extract_groups(step, pattern, self._patterns)

        arguments = bind_arguments(
            self.parameters_of(method),
            projections,
            projection_values,
            assignments,
            assignment_values,
            groups,
            mode=self.config.coercion_mode,
        )
        logger.debug("Bound %r to %d argument(s)", step, len(arguments))

        return BindingResult(
            step=f"{kind} {step}",
            method=method,
            projections=tuple(projections),
            arguments=tuple(arguments),
        )

    def bind_step(
        self,
        step: str | None,
        method: Callable[..., Any],
        projection_values: Mapping[str, str] | None = None,
        kind: str | None = None,
    ) -> BindingResult:
        """Bind a step to a callable decorated with given/when/then.

        The declared pattern comes from the decorator; ``kind`` overrides the
        decorator's kind (e.g. for "And"/"But" steps).

        Raises:
            BindingDefinitionError: If ``method`` has no step definition
        """
        definition = step_definition_of(method)
        if definition is None:
            raise BindingDefinitionError(
                f"{getattr(method, '__qualname__', method)!r} is not a step definition"
            )
        return self.build(
            kind or definition.kind,
            step,
            method,
            projection_values,
            definition.pattern,
        )

    def clear_cache(self) -> None:
        """Clear the compiled-pattern and parameter caches."""
        self._patterns.clear()
        with self._lock:
            self._parameters.clear()


def build_binding(
    kind: str,
    step: str | None,
    method: Callable[..., Any],
    projection_values: Mapping[str, str] | None,
    pattern: str | None,
) -> BindingResult:
    """Bind a step with a throwaway engine using the default configuration.

    Callers binding many steps should hold their own BindingEngine so that
    compiled patterns are reused.
    """
    return BindingEngine().build(kind, step, method, projection_values, pattern)
