"""Placeholder utilities for template prompts.

Template prompts mark variables with single braces, e.g. ``Write about {topic}``.
Any text between ``{`` and the next ``}`` is a variable name.

Updates: v0.2.0 - 2026-10-19 - Replace Jinja2 preview renderer with brace placeholder filling.
Updates: v0.1.1 - 2025-11-27 - Add contextual hints to Jinja2 syntax errors.
Updates: v0.1.0 - 2025-11-25 - Add strict Jinja2 renderer, custom filters,
and schema validation helpers.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

_PLACEHOLDER_PATTERN = re.compile(r"\{([^}]+)\}")


def _name_list_factory() -> list[str]:
    return []


@dataclass(slots=True)
class TemplateFillResult:
    """Outcome of substituting values into a template prompt."""

    text: str
    missing_variables: list[str] = field(default_factory=_name_list_factory)

    @property
    def is_complete(self) -> bool:
        """Return True when every placeholder received a non-blank value."""
        return not self.missing_variables


def extract_template_variables(content: str) -> list[str]:
    """Return unique placeholder names in order of first appearance."""
    seen: dict[str, None] = {}
    for match in _PLACEHOLDER_PATTERN.finditer(content):
        seen.setdefault(match.group(1), None)
    return list(seen)


def fill_template(content: str, values: Mapping[str, str]) -> TemplateFillResult:
    """Substitute *values* into every placeholder of *content*.

    Placeholders without a value are replaced by an empty string and reported
    in ``missing_variables``. Substituted values are not scanned again.
    """
    missing = [
        name
        for name in extract_template_variables(content)
        if not str(values.get(name) or "").strip()
    ]

    def _substitute(match: re.Match[str]) -> str:
        return str(values.get(match.group(1)) or "")

    return TemplateFillResult(
        text=_PLACEHOLDER_PATTERN.sub(_substitute, content),
        missing_variables=missing,
    )


__all__ = ["TemplateFillResult", "extract_template_variables", "fill_template"]
