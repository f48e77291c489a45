"""Tests for Prompt and Category records.

Updates:
  v0.2.0 - 2026-10-19 - Cover epoch-millis stamps, immutability rules, and camelCase records.
  v0.1.0 - 2025-10-30 - Cover prompt serialization round trip.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from models.category_model import Category, category_name_map
from models.prompt_model import Prompt, millis_to_datetime


def test_create_trims_text_and_matches_timestamps() -> None:
    """New prompts start with equal created and updated stamps."""
    prompt = Prompt.create("  Title ", " Body  ", tags=("a", "b"), timestamp=42)

    assert (prompt.title, prompt.content) == ("Title", "Body")
    assert prompt.tags == ["a", "b"]
    assert prompt.created_at == prompt.updated_at == 42
    assert prompt.id


def test_updated_at_defaults_to_created_at() -> None:
    """A missing or earlier update stamp is raised to the creation stamp."""
    assert Prompt(id="1", title="t", content="c", created_at=10).updated_at == 10
    assert Prompt(id="1", title="t", content="c", created_at=10, updated_at=3).updated_at == 10


def test_touch_never_moves_backwards() -> None:
    """touch keeps the later of the current and supplied stamps."""
    prompt = Prompt(id="1", title="t", content="c", created_at=10, updated_at=50)

    prompt.touch(20)
    assert prompt.updated_at == 50
    prompt.touch(60)
    assert prompt.updated_at == 60


def test_with_changes_refreshes_stamp_and_protects_identity() -> None:
    """with_changes copies the prompt and refuses id or created_at edits."""
    prompt = Prompt(id="1", title="t", content="c", created_at=10)

    changed = prompt.with_changes(title="new", updated_at=99)

    assert changed.title == "new"
    assert changed.updated_at == 99
    assert prompt.title == "t"
    with pytest.raises(ValueError):
        prompt.with_changes(id="2")
    with pytest.raises(ValueError):
        prompt.with_changes(created_at=0)


def test_record_round_trip() -> None:
    """to_record and from_record preserve every field."""
    prompt = Prompt(
        id="1",
        title="t",
        content="c",
        category_id="cat",
        tags=["x"],
        is_favorite=True,
        is_template=True,
        created_at=5,
        updated_at=8,
    )

    assert Prompt.from_record(prompt.to_record()) == prompt


def test_from_record_accepts_camel_case_and_iso_dates() -> None:
    """Browser-era records with camelCase keys and ISO stamps load."""
    prompt = Prompt.from_record(
        {
            "id": "1",
            "title": "t",
            "content": "c",
            "categoryId": "cat",
            "isFavorite": True,
            "createdAt": "1970-01-01T00:00:01.000Z",
        }
    )

    assert prompt.category_id == "cat"
    assert prompt.is_favorite is True
    assert prompt.is_template is False
    assert prompt.created_at == prompt.updated_at == 1_000


def test_is_uncategorized_handles_dangling_ids() -> None:
    """Empty and unknown category ids both count as uncategorized."""
    assert Prompt(id="1", title="t", content="c").is_uncategorized({"a"})
    assert Prompt(id="1", title="t", content="c", category_id="b").is_uncategorized({"a"})
    assert not Prompt(id="1", title="t", content="c", category_id="a").is_uncategorized({"a"})


def test_millis_to_datetime_is_utc() -> None:
    """Epoch milliseconds convert to aware UTC datetimes."""
    assert millis_to_datetime(1_500) == datetime(1970, 1, 1, 0, 0, 1, 500_000, tzinfo=UTC)


def test_category_record_helpers() -> None:
    """Categories serialise optional icons and build name lookups."""
    plain = Category(id="1", name="Coding")
    with_icon = Category.from_record({"id": "2", "name": "Writing", "icon": " pen "})

    assert plain.to_record() == {"id": "1", "name": "Coding"}
    assert with_icon.icon == "pen"
    assert category_name_map([plain, with_icon]) == {"1": "Coding", "2": "Writing"}
    assert Category.create("New").id != Category.create("New").id
