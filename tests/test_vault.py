"""Tests for the PromptVault service.

Updates: v0.1.0 - 2026-10-19 - Cover seeding, CRUD, bulk edits, CSV import/export, and queries.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest

from core.csv_codec import export_filename
from core.exceptions import CategoryNotFoundError, ExportError, PromptNotFoundError
from core.storage import DualBackendStore, MemoryFallbackBackend
from core.vault import CATEGORIES_KEY, PROMPTS_KEY, PromptVault


def _ticking_clock(start: int = 1_000) -> Iterator[int]:
    value = start
    while True:
        yield value
        value += 10


def _make_vault(
    fallback: MemoryFallbackBackend | None = None,
    *,
    seed_defaults: bool = False,
    export_dir: Path | None = None,
) -> PromptVault:
    ticks = _ticking_clock()
    store = DualBackendStore(None, fallback or MemoryFallbackBackend())
    return PromptVault(
        store,
        seed_defaults=seed_defaults,
        export_dir=export_dir,
        clock=lambda: next(ticks),
    )


@pytest.mark.asyncio()
async def test_open_seeds_defaults_into_empty_store() -> None:
    """First run seeds sample categories and prompts and persists them."""
    fallback = MemoryFallbackBackend()
    vault = _make_vault(fallback, seed_defaults=True)

    await vault.open()

    assert [category.name for category in vault.categories] == [
        "Coding",
        "Writing",
        "Marketing",
        "Productivity",
    ]
    assert [prompt.id for prompt in vault.prompts] == ["101", "102"]
    assert len(fallback.get(CATEGORIES_KEY)) == 4
    assert len(fallback.get(PROMPTS_KEY)) == 2
    await vault.close()


@pytest.mark.asyncio()
async def test_open_loads_stored_records_including_camel_case() -> None:
    """Stored collections hydrate, including browser-era camelCase records."""
    fallback = MemoryFallbackBackend(
        {
            CATEGORIES_KEY: [{"id": "c1", "name": "Work"}],
            PROMPTS_KEY: [
                {
                    "id": "p1",
                    "title": "Old",
                    "content": "Record",
                    "categoryId": "c1",
                    "tags": ["x"],
                    "isFavorite": True,
                    "createdAt": 5,
                    "updatedAt": 9,
                },
                "not a record",
            ],
        }
    )
    vault = _make_vault(fallback, seed_defaults=True)

    await vault.open()

    (prompt,) = vault.prompts
    assert prompt.category_id == "c1"
    assert prompt.is_favorite is True
    assert prompt.is_template is False
    assert (prompt.created_at, prompt.updated_at) == (5, 9)
    assert [category.name for category in vault.categories] == ["Work"]


@pytest.mark.asyncio()
async def test_open_without_seeding_starts_empty() -> None:
    """Seeding can be disabled."""
    vault = _make_vault()

    await vault.open()

    assert vault.categories == []
    assert vault.prompts == []


@pytest.mark.asyncio()
async def test_category_lifecycle_clears_prompt_references() -> None:
    """Deleting a category uncategorizes its prompts without deleting them."""
    fallback = MemoryFallbackBackend()
    vault = _make_vault(fallback)
    await vault.open()

    category = vault.add_category("  Research ")
    renamed = vault.rename_category(category.id, "Papers")
    prompt = vault.save_prompt("Title", "Content", category_id=category.id)

    cleared = vault.delete_category(category.id)

    assert renamed.name == "Papers"
    assert cleared == 1
    assert vault.categories == []
    updated = vault.get_prompt(prompt.id)
    assert updated.category_id == ""
    assert updated.updated_at > prompt.updated_at
    assert fallback.get(PROMPTS_KEY)[0]["category_id"] == ""
    with pytest.raises(CategoryNotFoundError):
        vault.delete_category(category.id)
    with pytest.raises(ValueError):
        vault.add_category("   ")


@pytest.mark.asyncio()
async def test_save_prompt_creates_first_and_updates_in_place() -> None:
    """New prompts go first; updates keep created_at and bump updated_at."""
    vault = _make_vault()
    await vault.open()

    first = vault.save_prompt("First", "One")
    second = vault.save_prompt(" Second ", " Two ", tags=["a", " ", "b "])
    assert [prompt.id for prompt in vault.prompts] == [second.id, first.id]
    assert second.title == "Second"
    assert second.tags == ["a", "b"]

    edited = vault.save_prompt("First v2", "One", prompt_id=first.id, is_template=True)

    assert edited.id == first.id
    assert edited.created_at == first.created_at
    assert edited.updated_at > first.updated_at
    assert vault.get_prompt(first.id).title == "First v2"
    with pytest.raises(PromptNotFoundError):
        vault.save_prompt("x", "y", prompt_id="missing")
    with pytest.raises(ValueError):
        vault.save_prompt("  ", "content")


@pytest.mark.asyncio()
async def test_toggle_favorite_and_delete_prompt() -> None:
    """Favourite toggles flip the flag; deletes remove the prompt."""
    vault = _make_vault()
    await vault.open()
    prompt = vault.save_prompt("Title", "Content")

    assert vault.toggle_favorite(prompt.id).is_favorite is True
    assert vault.toggle_favorite(prompt.id).is_favorite is False

    vault.delete_prompt(prompt.id)
    assert vault.prompts == []
    with pytest.raises(PromptNotFoundError):
        vault.delete_prompt(prompt.id)


@pytest.mark.asyncio()
async def test_bulk_operations() -> None:
    """Bulk move, retag, and delete report how many prompts changed."""
    vault = _make_vault()
    await vault.open()
    target = vault.add_category("Target")
    a = vault.save_prompt("A", "a", tags=["old", "keep"])
    b = vault.save_prompt("B", "b", tags=["keep"])
    c = vault.save_prompt("C", "c")

    assert vault.bulk_move([a.id, b.id, "unknown"], target.id) == 2
    assert vault.bulk_move([a.id], target.id) == 0
    with pytest.raises(CategoryNotFoundError):
        vault.bulk_move([a.id], "missing")

    assert vault.bulk_update_tags([a.id, b.id], add=["new"], remove=["old"]) == 2
    assert vault.get_prompt(a.id).tags == ["keep", "new"]
    assert vault.get_prompt(b.id).tags == ["keep", "new"]
    assert vault.bulk_update_tags([c.id], remove=["absent"]) == 0

    assert vault.bulk_delete([a.id, c.id, "unknown"]) == 2
    assert [prompt.id for prompt in vault.prompts] == [b.id]


@pytest.mark.asyncio()
async def test_import_csv_merges_prompts_and_categories(tmp_path: Path) -> None:
    """Imported prompts append after existing ones and new categories persist."""
    fallback = MemoryFallbackBackend()
    vault = _make_vault(fallback, seed_defaults=True)
    await vault.open()
    path = tmp_path / "import.csv"
    path.write_text(
        "Title,Content,Category,Tags,Favorite\n"
        "Hello,World,Work,a; b,Yes\n"
        ",Oops,Work,,\n"
        "Code,Review,Coding,,No\n",
        encoding="utf-8",
    )

    result = await vault.import_csv(path)
    second = await vault.import_csv(path)

    assert result.success is True
    assert result.prompts_imported == 2
    assert not any("Created new category" in w for w in second.warnings)
    names = [category.name for category in vault.categories]
    assert names.count("Work") == 1
    assert [prompt.title for prompt in vault.prompts][:2] == [
        "React Component Generator",
        "Blog Post Outline",
    ]
    assert len(vault.prompts) == 6
    assert vault.get_prompt(vault.prompts[3].id).category_id == "1"
    assert len(fallback.get(PROMPTS_KEY)) == 6


@pytest.mark.asyncio()
async def test_import_csv_failure_leaves_vault_unchanged(tmp_path: Path) -> None:
    """Fatal import errors do not modify the collections."""
    vault = _make_vault(seed_defaults=True)
    await vault.open()
    before = (vault.categories, vault.prompts)
    path = tmp_path / "bad.csv"
    path.write_text("Name,Body\nA,B\n", encoding="utf-8")

    result = await vault.import_csv(path)
    missing = await vault.import_csv(tmp_path / "absent.csv")

    assert result.success is False
    assert missing.success is False
    assert (vault.categories, vault.prompts) == before


@pytest.mark.asyncio()
async def test_export_csv_to_directory_uses_dated_filename(tmp_path: Path) -> None:
    """Exports into a directory pick the backup or selection filename."""
    vault = _make_vault(seed_defaults=True, export_dir=tmp_path)
    await vault.open()
    today = datetime.now(UTC).date()

    full = vault.export_csv()
    selected = vault.export_csv(tmp_path, ["101"])

    assert full == tmp_path / export_filename(today=today)
    assert selected == tmp_path / export_filename(selected=True, today=today)
    assert len(full.read_text(encoding="utf-8").split("\n")) == 3
    selected_lines = selected.read_text(encoding="utf-8").split("\n")
    assert len(selected_lines) == 2
    assert selected_lines[1].startswith('"React Component Generator"')


@pytest.mark.asyncio()
async def test_export_csv_to_file_path_and_failure(tmp_path: Path) -> None:
    """Explicit file paths are honoured and I/O failures raise ExportError."""
    vault = _make_vault(seed_defaults=True)
    await vault.open()
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    target = vault.export_csv(tmp_path / "out" / "prompts.csv")

    assert target.exists()
    with pytest.raises(ExportError):
        vault.export_csv(blocker / "prompts.csv")


@pytest.mark.asyncio()
async def test_queries_delegate_to_search_helpers() -> None:
    """search, filter, and tag_counts operate on the vault collections."""
    vault = _make_vault(seed_defaults=True)
    await vault.open()

    results = vault.search("react")

    assert [prompt.id for prompt in results.prompts] == ["101"]
    assert results.tags == ["react"]
    assert [prompt.id for prompt in vault.filter(favorites_only=True)] == ["101"]
    assert [prompt.id for prompt in vault.filter(category_id="2")] == ["102"]
    assert vault.tag_counts("1") == {"react": 1, "typescript": 1, "frontend": 1}
