"""Exception hierarchy for step-binder."""


class StepBinderError(Exception):
    """Base class for all step-binder errors."""


class PatternCompilationError(StepBinderError, ValueError):
    """A declared step pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid step pattern {pattern!r}: {reason}")


class BindingDefinitionError(StepBinderError, TypeError):
    """A step-definition callable declares its bindings incorrectly."""


class ConfigurationError(StepBinderError):
    """The binder configuration could not be loaded or validated."""
