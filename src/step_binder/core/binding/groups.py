"""Capture-group extraction from declared step patterns."""

import logging
import re
import threading
from collections import OrderedDict

from step_binder.core.binding.placeholders import PLACEHOLDER_PATTERN
from step_binder.exceptions import PatternCompilationError

logger = logging.getLogger(__name__)

# Each <name> becomes a non-greedy "anything" group.
WILDCARD_GROUP = "(.*?)"


def substitute_placeholders(pattern: str) -> str:
    """Rewrite every ``<name>`` in ``pattern`` into a wildcard capture group."""
    return PLACEHOLDER_PATTERN.sub(lambda _match: WILDCARD_GROUP, pattern)


def compile_pattern(source: str) -> re.Pattern[str]:
    """Compile a declared pattern, raising PatternCompilationError on bad syntax."""
    try:
        return re.compile(source)
    except re.error as e:
        raise PatternCompilationError(source, str(e)) from e


class PatternCache:
    """Bounded LRU cache of compiled step patterns.

    Keys are ``(source, substituted)`` so the verbatim and the
    placeholder-substituted compilation of one source never collide.
    A ``max_size`` of 0 disables caching.
    """

    def __init__(self, max_size: int = 256) -> None:
        """Initialize an empty cache holding at most ``max_size`` patterns."""
        self._max_size = max_size
        self._patterns: OrderedDict[tuple[str, bool], re.Pattern[str]] = (
            OrderedDict()
        )
        self._lock = threading.Lock()

    def get(self, source: str, substituted: bool = False) -> re.Pattern[str]:
        """Return the compiled form of ``source``, compiling on a miss."""
        key = (source, substituted)
        with self._lock:
            compiled = self._patterns.get(key)
            if compiled is not None:
                self._patterns.move_to_end(key)
                return compiled

        logger.debug("Compiling step pattern %r (substituted=%s)", source, substituted)
        compiled = compile_pattern(
            substitute_placeholders(source) if substituted else source
        )

        if self._max_size > 0:
            with self._lock:
                self._patterns[key] = compiled
                self._patterns.move_to_end(key)
                while len(self._patterns) > self._max_size:
                    self._patterns.popitem(last=False)
        return compiled

    def clear(self) -> None:
        """Drop all cached patterns."""
        with self._lock:
            self._patterns.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._patterns)


def _full_match_groups(step: str, compiled: re.Pattern[str]) -> list[str | None]:
    match = compiled.fullmatch(step)
    if match is None:
        return []
    # Optional groups that did not participate stay None, not "".
    return [match.group(0), *match.groups()]


def extract_groups(
    step: str | None, pattern: str | None, cache: PatternCache | None = None
) -> list[str | None]:
    """Full-match ``pattern`` verbatim against ``step`` and return its groups.

    Index 0 is the whole match and the remaining entries are the capture
    groups in order. A pattern that only matches part of the step yields
    an empty list, as do missing inputs.
    """
    if step is None or pattern is None:
        return []
    compiled = cache.get(pattern) if cache is not None else compile_pattern(pattern)
    return _full_match_groups(step, compiled)


def extract_assigned_values(
    step: str | None, pattern: str | None, cache: PatternCache | None = None
) -> list[str | None]:
    """Full-match the placeholder-substituted ``pattern`` against ``step``.

    ``"I have <n> items"`` matched against ``"I have 3 items"`` yields
    ``["I have 3 items", "3"]``.
    """
    if step is None or pattern is None:
        return []
    if cache is not None:
        compiled = cache.get(pattern, substituted=True)
    else:
        compiled = compile_pattern(substitute_placeholders(pattern))
    return _full_match_groups(step, compiled)
