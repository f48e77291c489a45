"""Prompt data model definitions.

Updates: v0.9.0 - 2026-10-19 - Reshape Prompt around title/content records with epoch-millis stamps.
Updates: v0.8.0 - 2025-11-22 - Persist prompt category slugs for taxonomy management.
Updates: v0.1.0 - 2025-10-30 - Initial Prompt schema with serialization helpers.
"""
from __future__ import annotations

import time
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# Stored keys written by this package paired with the camelCase spellings used
# by browser-era backups of the same records.
_RECORD_ALIASES: dict[str, str] = {
    "category_id": "categoryId",
    "is_favorite": "isFavorite",
    "is_template": "isTemplate",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def now_millis() -> int:
    """Return the current wall-clock time as integer epoch milliseconds."""
    return time.time_ns() // 1_000_000


def new_prompt_id() -> str:
    """Return a fresh opaque prompt identifier."""
    return str(uuid.uuid4())


def millis_to_datetime(value: int) -> datetime:
    """Convert epoch milliseconds into an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=value)


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    if key in data:
        return data[key]
    alias = _RECORD_ALIASES.get(key)
    if alias is not None:
        return data.get(alias)
    return None


def _ensure_millis(value: Any, default: int) -> int:
    """Coerce timestamps stored as numbers, ISO strings or datetimes to epoch millis."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        aware = value if value.tzinfo else value.replace(tzinfo=UTC)
        return int(aware.timestamp() * 1000)
    text = str(value).strip()
    if not text:
        return default
    try:
        return int(float(text))
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp() * 1000)


def _serialize_tags(items: Iterable[Any] | str | None) -> list[str]:
    """Normalize tag inputs into a list of strings, preserving order."""
    if items is None:
        return []
    if isinstance(items, str):
        return [items]
    return [str(item) for item in items]


@dataclass(slots=True)
class Prompt:
    """Dataclass representation of a stored prompt."""

    id: str
    title: str
    content: str
    category_id: str = ""
    tags: list[str] = field(default_factory=list)
    is_favorite: bool = False
    is_template: bool = False
    created_at: int = field(default_factory=now_millis)
    updated_at: int = -1

    def __post_init__(self) -> None:
        """Default the update stamp to the creation stamp for fresh prompts."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @classmethod
    def create(
        cls,
        title: str,
        content: str,
        *,
        category_id: str = "",
        tags: Iterable[str] | None = None,
        is_favorite: bool = False,
        is_template: bool = False,
        timestamp: int | None = None,
    ) -> Prompt:
        """Return a new prompt with a generated id and matching timestamps."""
        stamp = now_millis() if timestamp is None else timestamp
        return cls(
            id=new_prompt_id(),
            title=title.strip(),
            content=content.strip(),
            category_id=category_id,
            tags=list(tags or []),
            is_favorite=is_favorite,
            is_template=is_template,
            created_at=stamp,
            updated_at=stamp,
        )

    def touch(self, timestamp: int | None = None) -> None:
        """Refresh ``updated_at`` without letting it move backwards."""
        stamp = now_millis() if timestamp is None else timestamp
        self.updated_at = max(self.updated_at, stamp)

    def with_changes(self, **changes: Any) -> Prompt:
        """Return a copy with *changes* applied and a refreshed update stamp.

        ``id`` and ``created_at`` are immutable and cannot be changed here.
        """
        for frozen in ("id", "created_at"):
            if frozen in changes:
                raise ValueError(f"{frozen} cannot be changed after creation")
        timestamp = changes.pop("updated_at", None)
        updated = replace(self, **changes)
        updated.touch(timestamp)
        return updated

    def is_uncategorized(self, category_ids: Iterable[str]) -> bool:
        """Return True when the prompt has no category or a dangling reference."""
        if not self.category_id:
            return True
        return self.category_id not in set(category_ids)

    def to_record(self) -> dict[str, Any]:
        """Return a plain dictionary representation for persistence."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category_id": self.category_id,
            "tags": list(self.tags),
            "is_favorite": self.is_favorite,
            "is_template": self.is_template,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Prompt:
        """Create a Prompt from a stored record, defaulting missing fields."""
        created_at = _ensure_millis(_lookup(data, "created_at"), now_millis())
        return cls(
            id=str(data.get("id") or new_prompt_id()),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            category_id=str(_lookup(data, "category_id") or ""),
            tags=_serialize_tags(data.get("tags")),
            is_favorite=bool(_lookup(data, "is_favorite") or False),
            is_template=bool(_lookup(data, "is_template") or False),
            created_at=created_at,
            updated_at=_ensure_millis(_lookup(data, "updated_at"), created_at),
        )


__all__ = ["Prompt", "millis_to_datetime", "new_prompt_id", "now_millis"]
