"""Tests for template placeholder extraction and filling.

Updates: v0.2.0 - 2026-10-19 - Replace Jinja2 preview tests with brace placeholder coverage.
"""

from __future__ import annotations

from core.templating import extract_template_variables, fill_template


def test_extract_variables_in_first_seen_order() -> None:
    """Duplicate placeholders are reported once."""
    content = "Write about {topic} for {audience}. Keep {topic} short."

    assert extract_template_variables(content) == ["topic", "audience"]


def test_extract_variables_allows_any_text_between_braces() -> None:
    """Names may contain spaces and punctuation."""
    assert extract_template_variables("Use {target language} and {x-y}") == [
        "target language",
        "x-y",
    ]


def test_extract_variables_ignores_empty_braces() -> None:
    """``{}`` is not a placeholder."""
    assert extract_template_variables("json {} literal") == []


def test_fill_template_substitutes_every_occurrence() -> None:
    """All occurrences of a placeholder are replaced."""
    result = fill_template("{a} and {a} then {b}", {"a": "x", "b": "y"})

    assert result.text == "x and x then y"
    assert result.is_complete is True


def test_fill_template_reports_missing_values() -> None:
    """Unfilled placeholders become empty and are listed as missing."""
    result = fill_template("Hi {name}, from {sender}", {"name": "Ada", "sender": "  "})

    assert result.text == "Hi Ada, from   "
    assert result.missing_variables == ["sender"]
    assert result.is_complete is False


def test_fill_template_does_not_rescan_substituted_values() -> None:
    """Values containing braces are inserted literally."""
    result = fill_template("{a}", {"a": "{b}", "b": "nope"})

    assert result.text == "{b}"
