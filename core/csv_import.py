"""Reconcile untrusted CSV rows into prompts and categories.

Import never raises past this module. File-level problems (empty input, missing
mandatory columns, unreadable files) become errors on a failed
:class:`ImportResult`; row-level problems become warnings and the rest of the
batch continues.

Updates:
  v0.8.0 - 2026-10-19 - Replace JSON catalogue importer with CSV reconciliation and reports.
  v0.5.0 - 2025-11-05 - Seeded SQLite/Chroma from packaged or user catalogues.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from models.category_model import UNCATEGORIZED_LABEL, Category
from models.prompt_model import Prompt, now_millis

from .csv_tokenizer import parse_csv

if TYPE_CHECKING:  # pragma: no cover - typing only
    from collections.abc import Callable, Sequence
    from pathlib import Path

logger = logging.getLogger("promptvault.import")

EMPTY_FILE_ERROR = "CSV file is empty"
MISSING_COLUMNS_ERROR = 'CSV must contain "Title" and "Content" columns'


def _string_list_factory() -> list[str]:
    return []


def _prompt_list_factory() -> list[Prompt]:
    return []


def _category_list_factory() -> list[Category]:
    return []


@dataclass(slots=True)
class ImportResult:
    """Report describing the outcome of a single import call."""

    success: bool = True
    prompts_imported: int = 0
    errors: list[str] = field(default_factory=_string_list_factory)
    warnings: list[str] = field(default_factory=_string_list_factory)

    @classmethod
    def failed(cls, message: str) -> ImportResult:
        """Return a fatal result carrying a single error."""
        return cls(success=False, prompts_imported=0, errors=[message])

    def summary(self) -> dict[str, int]:
        """Return aggregate counts for downstream reporting."""
        return {
            "imported": self.prompts_imported,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }


@dataclass(slots=True)
class ImportOutcome:
    """Accepted prompts, the extended category list, and the report."""

    prompts: list[Prompt] = field(default_factory=_prompt_list_factory)
    categories: list[Category] = field(default_factory=_category_list_factory)
    result: ImportResult = field(default_factory=ImportResult)


@dataclass(slots=True, frozen=True)
class _ColumnMap:
    title: int
    content: int
    category: int = -1
    tags: int = -1
    favorite: int = -1
    is_template: int = -1

    @classmethod
    def from_header(cls, header: Sequence[str]) -> _ColumnMap | None:
        names = [cell.strip().lower() for cell in header]

        def index_of(name: str) -> int:
            return names.index(name) if name in names else -1

        title = index_of("title")
        content = index_of("content")
        if title == -1 or content == -1:
            return None
        return cls(
            title=title,
            content=content,
            category=index_of("category"),
            tags=index_of("tags"),
            favorite=index_of("favorite"),
            is_template=index_of("istemplate"),
        )


def _cell(row: Sequence[str], index: int) -> str:
    if index < 0 or index >= len(row):
        return ""
    return row[index].strip()


def _parse_flag(row: Sequence[str], index: int) -> bool:
    return _cell(row, index).lower() == "yes"


def parse_tags(value: str) -> list[str]:
    """Split a ``;`` separated tag cell, dropping empty entries."""
    return [part.strip() for part in value.split(";") if part.strip()]


def reconcile_rows(
    rows: Sequence[Sequence[str]],
    existing_categories: Sequence[Category],
    *,
    clock: Callable[[], int] = now_millis,
) -> ImportOutcome:
    """Map tokenized *rows* onto prompts, creating categories named by the rows.

    ``rows[0]`` is the header. *existing_categories* is never mutated; the
    returned category list is a copy extended with synthesized categories.
    """
    categories = list(existing_categories)
    outcome = ImportOutcome(categories=categories)
    result = outcome.result

    if not rows:
        outcome.result = ImportResult.failed(EMPTY_FILE_ERROR)
        return outcome

    columns = _ColumnMap.from_header(rows[0])
    if columns is None:
        outcome.result = ImportResult.failed(MISSING_COLUMNS_ERROR)
        return outcome

    name_to_id: dict[str, str] = {category.name: category.id for category in categories}

    for offset, row in enumerate(rows[1:], start=2):
        try:
            title = _cell(row, columns.title)
            content = _cell(row, columns.content)
            if not title or not content:
                result.warnings.append(f"Row {offset}: Skipped (missing title or content)")
                continue

            category_id = ""
            category_name = _cell(row, columns.category)
            if category_name and category_name != UNCATEGORIZED_LABEL:
                category_id = name_to_id.get(category_name, "")
                if not category_id:
                    category = Category.create(category_name)
                    categories.append(category)
                    name_to_id[category_name] = category.id
                    category_id = category.id
                    result.warnings.append(f'Created new category: "{category_name}"')

            outcome.prompts.append(
                Prompt.create(
                    title,
                    content,
                    category_id=category_id,
                    tags=parse_tags(_cell(row, columns.tags)),
                    is_favorite=_parse_flag(row, columns.favorite),
                    is_template=_parse_flag(row, columns.is_template),
                    timestamp=clock(),
                )
            )
        except Exception as exc:  # noqa: BLE001 - row failures are reported, not raised
            message = str(exc) or "Unknown error"
            result.warnings.append(f"Row {offset}: Error parsing row - {message}")

    result.prompts_imported = len(outcome.prompts)
    result.success = not result.errors
    logger.debug(
        "Reconciled %d row(s): %d accepted, %d warning(s)",
        len(rows) - 1,
        result.prompts_imported,
        len(result.warnings),
    )
    return outcome


def import_prompts_from_csv(
    csv_text: str,
    existing_categories: Sequence[Category],
    *,
    clock: Callable[[], int] = now_millis,
) -> ImportOutcome:
    """Tokenize *csv_text* and reconcile it against *existing_categories*."""
    try:
        rows = parse_csv(csv_text)
    except Exception as exc:  # pragma: no cover - tokenizer is total over str input
        message = str(exc) or "Unknown error"
        outcome = ImportOutcome(categories=list(existing_categories))
        outcome.result = ImportResult.failed(f"Failed to parse CSV: {message}")
        return outcome
    return reconcile_rows(rows, existing_categories, clock=clock)


async def read_csv_file(path: Path) -> str:
    """Return the full text of *path*, reading it off the event loop."""
    return await asyncio.to_thread(path.expanduser().read_text, encoding="utf-8-sig")


async def import_csv_file(
    path: Path,
    existing_categories: Sequence[Category],
    *,
    clock: Callable[[], int] = now_millis,
) -> ImportOutcome:
    """Read *path* and import it; read failures become a failed result."""
    try:
        text = await read_csv_file(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Unable to read CSV file %s: %s", path, exc)
        outcome = ImportOutcome(categories=list(existing_categories))
        outcome.result = ImportResult.failed(f"Error reading file: {exc}")
        return outcome
    outcome = import_prompts_from_csv(text, existing_categories, clock=clock)
    logger.info(
        "Imported %d prompt(s) from %s (%d error(s), %d warning(s))",
        outcome.result.prompts_imported,
        path,
        len(outcome.result.errors),
        len(outcome.result.warnings),
    )
    return outcome


__all__ = [
    "EMPTY_FILE_ERROR",
    "MISSING_COLUMNS_ERROR",
    "ImportOutcome",
    "ImportResult",
    "import_csv_file",
    "import_prompts_from_csv",
    "parse_tags",
    "read_csv_file",
    "reconcile_rows",
]
