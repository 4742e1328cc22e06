"""Placeholder extraction for ``<name>`` tokens."""

import re

PLACEHOLDER_PATTERN = re.compile(r"<(.+?)>")


def extract_placeholders(text: str | None) -> list[str]:
    """Return the names of all ``<name>`` tokens in ``text``.

    Names are returned in order of appearance. Repeated names are kept,
    so ``"<a> and <a>"`` yields ``["a", "a"]``.
    """
    if not text:
        return []
    return [match.group(1) for match in PLACEHOLDER_PATTERN.finditer(text)]
