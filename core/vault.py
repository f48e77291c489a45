"""Prompt vault service owning the category and prompt collections.

The vault keeps both collections in memory and writes every mutation through
the dual-backend store under the ``pv_categories`` and ``pv_prompts`` keys.

Updates:
  v0.1.0 - 2026-10-19 - Introduce vault service with CRUD, bulk edits, CSV import/export.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from models.category_model import Category
from models.prompt_model import Prompt, now_millis

from .csv_codec import export_filename, write_csv_export
from .csv_import import ImportResult, import_csv_file
from .exceptions import CategoryNotFoundError, PromptNotFoundError
from .search import (
    GroupedSearchResults,
    SortOption,
    filter_prompts,
    search_by_query,
    tag_counts,
)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .storage import DualBackendStore

logger = logging.getLogger("promptvault.vault")

CATEGORIES_KEY = "pv_categories"
PROMPTS_KEY = "pv_prompts"

T = TypeVar("T")


def default_categories() -> list[Category]:
    """Return the categories seeded into an empty vault."""
    return [
        Category(id="1", name="Coding"),
        Category(id="2", name="Writing"),
        Category(id="3", name="Marketing"),
        Category(id="4", name="Productivity"),
    ]


def default_prompts(timestamp: int | None = None) -> list[Prompt]:
    """Return the sample prompts seeded into an empty vault."""
    stamp = now_millis() if timestamp is None else timestamp
    return [
        Prompt(
            id="101",
            title="React Component Generator",
            content=(
                "Create a functional React component using TypeScript and Tailwind CSS. "
                "The component should be responsive and accessible. "
                "Include interface definitions for props."
            ),
            category_id="1",
            tags=["react", "typescript", "frontend"],
            is_favorite=True,
            created_at=stamp,
            updated_at=stamp,
        ),
        Prompt(
            id="102",
            title="Blog Post Outline",
            content=(
                "Write a detailed outline for a blog post about [Topic]. Include a catchy "
                "title, introduction with a hook, 3 main section headers with bullet points, "
                "and a conclusion with a call to action."
            ),
            category_id="2",
            tags=["blog", "content", "seo"],
            created_at=stamp,
            updated_at=stamp,
        ),
    ]


def _hydrate(raw: Any, factory: Callable[[Mapping[str, Any]], T], key: str) -> list[T]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Ignoring stored collection with unexpected type", extra={"key": key})
        return []
    items: list[T] = []
    for record in raw:
        if isinstance(record, Mapping):
            items.append(factory(record))
        else:
            logger.warning("Skipping malformed stored record", extra={"key": key})
    return items


def _clean_name(name: str) -> str:
    text = name.strip()
    if not text:
        raise ValueError("Category name must not be empty")
    return text


class PromptVault:
    """Service facade over the prompt collections and their persistence."""

    def __init__(
        self,
        store: DualBackendStore,
        *,
        seed_defaults: bool = True,
        export_dir: Path | None = None,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._store = store
        self._seed_defaults = seed_defaults
        self._export_dir = export_dir
        self._clock = clock
        self._categories: list[Category] = []
        self._prompts: list[Prompt] = []
        self._import_lock = asyncio.Lock()

    @property
    def store(self) -> DualBackendStore:
        """Return the backing store."""
        return self._store

    @property
    def categories(self) -> list[Category]:
        """Return a copy of the category list in display order."""
        return list(self._categories)

    @property
    def prompts(self) -> list[Prompt]:
        """Return a copy of the prompt list in storage order."""
        return list(self._prompts)

    # Lifecycle --------------------------------------------------------- #

    async def open(self) -> None:
        """Load both collections, seeding defaults when nothing is stored."""
        raw_categories = await self._store.load(CATEGORIES_KEY)
        raw_prompts = await self._store.load(PROMPTS_KEY)

        if raw_categories is None and self._seed_defaults:
            self._categories = default_categories()
            self._persist_categories()
            logger.info("Seeded %d default categories", len(self._categories))
        else:
            self._categories = _hydrate(raw_categories, Category.from_record, CATEGORIES_KEY)

        if raw_prompts is None and self._seed_defaults:
            self._prompts = default_prompts(self._clock())
            self._persist_prompts()
            logger.info("Seeded %d default prompts", len(self._prompts))
        else:
            self._prompts = _hydrate(raw_prompts, Prompt.from_record, PROMPTS_KEY)

        logger.debug(
            "Vault opened with %d categories and %d prompts",
            len(self._categories),
            len(self._prompts),
        )

    async def close(self) -> None:
        """Flush pending writes and release the store."""
        await self._store.close()

    def _persist_categories(self) -> None:
        self._store.save(CATEGORIES_KEY, [category.to_record() for category in self._categories])

    def _persist_prompts(self) -> None:
        self._store.save(PROMPTS_KEY, [prompt.to_record() for prompt in self._prompts])

    # Lookups ----------------------------------------------------------- #

    def get_category(self, category_id: str) -> Category:
        """Return the category with *category_id*."""
        for category in self._categories:
            if category.id == category_id:
                return category
        raise CategoryNotFoundError(f"Category {category_id} not found")

    def get_prompt(self, prompt_id: str) -> Prompt:
        """Return the prompt with *prompt_id*."""
        return self._prompts[self._prompt_index(prompt_id)]

    def _prompt_index(self, prompt_id: str) -> int:
        for index, prompt in enumerate(self._prompts):
            if prompt.id == prompt_id:
                return index
        raise PromptNotFoundError(f"Prompt {prompt_id} not found")

    def _require_category_id(self, category_id: str) -> str:
        if category_id:
            self.get_category(category_id)
        return category_id

    # Categories -------------------------------------------------------- #

    def add_category(self, name: str, icon: str | None = None) -> Category:
        """Append a new category named *name*."""
        category = Category.create(_clean_name(name), icon=icon)
        self._categories.append(category)
        self._persist_categories()
        return category

    def rename_category(self, category_id: str, name: str) -> Category:
        """Rename the category with *category_id*."""
        category = self.get_category(category_id)
        category.name = _clean_name(name)
        self._persist_categories()
        return category

    def delete_category(self, category_id: str) -> int:
        """Remove a category and clear it from referencing prompts.

        Returns the number of prompts that became uncategorized.
        """
        category = self.get_category(category_id)
        self._categories = [item for item in self._categories if item.id != category.id]
        cleared = 0
        stamp = self._clock()
        for index, prompt in enumerate(self._prompts):
            if prompt.category_id == category.id:
                self._prompts[index] = prompt.with_changes(category_id="", updated_at=stamp)
                cleared += 1
        self._persist_categories()
        if cleared:
            self._persist_prompts()
        logger.info("Deleted category %s; %d prompt(s) uncategorized", category.name, cleared)
        return cleared

    # Prompts ----------------------------------------------------------- #

    def save_prompt(
        self,
        title: str,
        content: str,
        *,
        prompt_id: str | None = None,
        category_id: str = "",
        tags: Iterable[str] | None = None,
        is_favorite: bool = False,
        is_template: bool = False,
    ) -> Prompt:
        """Create a prompt, or update the one with *prompt_id*.

        New prompts are placed first. Updates keep ``created_at`` and refresh
        ``updated_at``.
        """
        title = title.strip()
        content = content.strip()
        if not title or not content:
            raise ValueError("Prompt title and content must not be empty")
        tag_list = [tag.strip() for tag in tags or [] if tag.strip()]

        if prompt_id is None:
            prompt = Prompt.create(
                title,
                content,
                category_id=category_id,
                tags=tag_list,
                is_favorite=is_favorite,
                is_template=is_template,
                timestamp=self._clock(),
            )
            self._prompts.insert(0, prompt)
        else:
            index = self._prompt_index(prompt_id)
            prompt = self._prompts[index].with_changes(
                title=title,
                content=content,
                category_id=category_id,
                tags=tag_list,
                is_favorite=is_favorite,
                is_template=is_template,
                updated_at=self._clock(),
            )
            self._prompts[index] = prompt
        self._persist_prompts()
        return prompt

    def delete_prompt(self, prompt_id: str) -> None:
        """Remove the prompt with *prompt_id*."""
        del self._prompts[self._prompt_index(prompt_id)]
        self._persist_prompts()

    def toggle_favorite(self, prompt_id: str) -> Prompt:
        """Flip the favourite flag of the prompt with *prompt_id*."""
        index = self._prompt_index(prompt_id)
        current = self._prompts[index]
        prompt = current.with_changes(is_favorite=not current.is_favorite, updated_at=self._clock())
        self._prompts[index] = prompt
        self._persist_prompts()
        return prompt

    def _bulk_apply(
        self,
        prompt_ids: Iterable[str],
        change: Callable[[Prompt, int], Prompt | None],
    ) -> int:
        wanted = set(prompt_ids)
        stamp = self._clock()
        changed = 0
        for index, prompt in enumerate(self._prompts):
            if prompt.id not in wanted:
                continue
            updated = change(prompt, stamp)
            if updated is not None:
                self._prompts[index] = updated
                changed += 1
        if changed:
            self._persist_prompts()
        return changed

    def bulk_move(self, prompt_ids: Iterable[str], category_id: str) -> int:
        """Move the selected prompts into *category_id* (``""`` uncategorizes)."""
        target = self._require_category_id(category_id)

        def move(prompt: Prompt, stamp: int) -> Prompt | None:
            if prompt.category_id == target:
                return None
            return prompt.with_changes(category_id=target, updated_at=stamp)

        return self._bulk_apply(prompt_ids, move)

    def bulk_update_tags(
        self,
        prompt_ids: Iterable[str],
        add: Iterable[str] = (),
        remove: Iterable[str] = (),
    ) -> int:
        """Add and remove tags on the selected prompts.

        Added tags are appended when absent; removals apply after additions.
        """
        additions = [tag.strip() for tag in add if tag.strip()]
        removals = {tag.strip() for tag in remove if tag.strip()}

        def retag(prompt: Prompt, stamp: int) -> Prompt | None:
            tags = list(prompt.tags)
            for tag in additions:
                if tag not in tags:
                    tags.append(tag)
            tags = [tag for tag in tags if tag not in removals]
            if tags == prompt.tags:
                return None
            return prompt.with_changes(tags=tags, updated_at=stamp)

        return self._bulk_apply(prompt_ids, retag)

    def bulk_delete(self, prompt_ids: Iterable[str]) -> int:
        """Delete the selected prompts and return how many were removed."""
        wanted = set(prompt_ids)
        remaining = [prompt for prompt in self._prompts if prompt.id not in wanted]
        removed = len(self._prompts) - len(remaining)
        if removed:
            self._prompts = remaining
            self._persist_prompts()
        return removed

    # CSV --------------------------------------------------------------- #

    async def import_csv(self, path: Path) -> ImportResult:
        """Import prompts from the CSV file at *path* and merge them into the vault.

        Imported prompts are appended after existing ones. Imports run one at
        a time so each sees the categories created by the previous one.
        """
        async with self._import_lock:
            outcome = await import_csv_file(path, self._categories, clock=self._clock)
            added_categories = len(outcome.categories) - len(self._categories)
            if added_categories:
                self._categories = outcome.categories
                self._persist_categories()
            if outcome.prompts:
                self._prompts.extend(outcome.prompts)
                self._persist_prompts()
            return outcome.result

    def export_csv(
        self,
        path: Path | None = None,
        selected_ids: Iterable[str] | None = None,
    ) -> Path:
        """Write prompts to a CSV file and return its path.

        With *selected_ids* only those prompts are exported. When *path* is
        omitted or names a directory, the conventional dated filename is used.
        """
        prompts = self._prompts
        selected = selected_ids is not None
        if selected_ids is not None:
            wanted = set(selected_ids)
            prompts = [prompt for prompt in self._prompts if prompt.id in wanted]

        if path is None:
            target = (self._export_dir or Path.cwd()) / export_filename(selected=selected)
        elif path.is_dir():
            target = path / export_filename(selected=selected)
        else:
            target = path
        return write_csv_export(target, prompts, self._categories)

    # Queries ----------------------------------------------------------- #

    def search(self, query: str) -> GroupedSearchResults:
        """Return categories, tags and prompts matching *query*."""
        return search_by_query(query, self._prompts, self._categories)

    def filter(
        self,
        *,
        category_id: str | None = None,
        tag: str | None = None,
        query: str = "",
        favorites_only: bool = False,
        sort: SortOption | str = SortOption.NEWEST,
    ) -> list[Prompt]:
        """Return prompts matching the list filters."""
        return filter_prompts(
            self._prompts,
            self._categories,
            category_id=category_id,
            tag=tag,
            query=query,
            favorites_only=favorites_only,
            sort=sort,
        )

    def tag_counts(self, category_id: str | None = None) -> dict[str, int]:
        """Return tag frequencies for the given category view."""
        return tag_counts(self._prompts, self._categories, category_id)


__all__ = [
    "CATEGORIES_KEY",
    "PROMPTS_KEY",
    "PromptVault",
    "default_categories",
    "default_prompts",
]
