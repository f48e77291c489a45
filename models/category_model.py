"""Category data model and serialization helpers.

Updates: v0.2.0 - 2026-10-19 - Replace slug taxonomy with opaque-id categories keyed by name.
Updates: v0.1.0 - 2025-11-22 - Introduce category dataclass and helpers.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

UNCATEGORIZED_LABEL = "Uncategorized"


def new_category_id() -> str:
    """Return a fresh opaque category identifier."""
    return str(uuid.uuid4())


def _clean_optional_text(value: str | None) -> str | None:
    """Strip whitespace from optional string inputs."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(slots=True)
class Category:
    """Named bucket that prompts reference by id."""

    id: str
    name: str
    icon: str | None = None

    def to_record(self) -> dict[str, Any]:
        """Serialize the category into a plain dictionary."""
        record: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.icon is not None:
            record["icon"] = self.icon
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> "Category":
        """Hydrate a Category from a stored mapping."""
        return cls(
            id=str(data.get("id") or new_category_id()),
            name=str(data.get("name") or ""),
            icon=_clean_optional_text(data.get("icon")),
        )

    @classmethod
    def create(cls, name: str, icon: str | None = None) -> "Category":
        """Return a new category with a generated id."""
        return cls(id=new_category_id(), name=name, icon=icon)


def category_name_map(categories: Sequence[Category]) -> dict[str, str]:
    """Return an id -> name lookup for *categories*."""
    return {category.id: category.name for category in categories}


__all__ = ["Category", "UNCATEGORIZED_LABEL", "category_name_map", "new_category_id"]
