"""Grouped search and list filtering over in-memory prompt collections.

Updates:
  v0.2.0 - 2026-10-19 - Replace semantic Chroma search with substring grouping and list filters.
  v0.1.0 - 2025-12-03 - Extract search, suggestion, and personalisation mixin.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.category_model import Category
    from models.prompt_model import Prompt

UNCATEGORIZED_FILTER = "uncategorized"

__all__ = [
    "GroupedSearchResults",
    "SortOption",
    "UNCATEGORIZED_FILTER",
    "filter_prompts",
    "search_by_query",
    "tag_counts",
]


def _category_list_factory() -> list[Category]:
    return []


def _prompt_list_factory() -> list[Prompt]:
    return []


def _tag_list_factory() -> list[str]:
    return []


@dataclass(slots=True)
class GroupedSearchResults:
    """Matches grouped by entity kind."""

    categories: list[Category] = field(default_factory=_category_list_factory)
    tags: list[str] = field(default_factory=_tag_list_factory)
    prompts: list[Prompt] = field(default_factory=_prompt_list_factory)

    def is_empty(self) -> bool:
        """Return True when nothing matched."""
        return not (self.categories or self.tags or self.prompts)


class SortOption(str, Enum):
    """Orderings offered by the prompt list."""

    NEWEST = "newest"
    OLDEST = "oldest"
    AZ = "az"
    ZA = "za"


def search_by_query(
    query: str,
    prompts: Sequence[Prompt],
    categories: Sequence[Category],
) -> GroupedSearchResults:
    """Return categories, tags and prompts whose text contains *query*.

    A blank query returns empty groups.
    """
    needle = query.strip().lower()
    if not needle:
        return GroupedSearchResults()

    matched_categories = [
        category for category in categories if needle in category.name.lower()
    ]
    matched_tags: set[str] = set()
    matched_prompts: list[Prompt] = []
    for prompt in prompts:
        hit_tags = [tag for tag in prompt.tags if needle in tag.lower()]
        if hit_tags or needle in prompt.title.lower() or needle in prompt.content.lower():
            matched_prompts.append(prompt)
            matched_tags.update(hit_tags)

    return GroupedSearchResults(
        categories=matched_categories,
        tags=sorted(matched_tags),
        prompts=matched_prompts,
    )


def _in_category(prompt: Prompt, category_id: str | None, known_ids: set[str]) -> bool:
    if not category_id:
        return True
    if category_id == UNCATEGORIZED_FILTER:
        return prompt.is_uncategorized(known_ids)
    return prompt.category_id == category_id


def tag_counts(
    prompts: Sequence[Prompt],
    categories: Sequence[Category],
    category_id: str | None = None,
) -> dict[str, int]:
    """Return tag frequencies within the selected category view."""
    known_ids = {category.id for category in categories}
    counter: Counter[str] = Counter()
    for prompt in prompts:
        if _in_category(prompt, category_id, known_ids):
            counter.update(prompt.tags)
    return dict(counter)


def filter_prompts(
    prompts: Sequence[Prompt],
    categories: Sequence[Category],
    *,
    category_id: str | None = None,
    tag: str | None = None,
    query: str = "",
    favorites_only: bool = False,
    sort: SortOption | str = SortOption.NEWEST,
) -> list[Prompt]:
    """Return prompts matching every active filter, ordered by *sort*."""
    known_ids = {category.id for category in categories}
    needle = query.lower()
    selected: list[Prompt] = []
    for prompt in prompts:
        if not _in_category(prompt, category_id, known_ids):
            continue
        if tag and tag not in prompt.tags:
            continue
        if favorites_only and not prompt.is_favorite:
            continue
        if needle and not (
            needle in prompt.title.lower()
            or needle in prompt.content.lower()
            or any(needle in item.lower() for item in prompt.tags)
        ):
            continue
        selected.append(prompt)

    order = SortOption(sort)
    if order is SortOption.OLDEST:
        selected.sort(key=lambda item: item.created_at)
    elif order is SortOption.AZ:
        selected.sort(key=lambda item: item.title.casefold())
    elif order is SortOption.ZA:
        selected.sort(key=lambda item: item.title.casefold(), reverse=True)
    else:
        selected.sort(key=lambda item: item.created_at, reverse=True)
    return selected
