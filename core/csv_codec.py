"""Serialize prompts into the spreadsheet-compatible CSV backup format.

Updates:
  v0.1.1 - 2026-10-19 - Report out-of-range timestamps as export failures.
  v0.1.0 - 2026-10-19 - Add always-quoted CSV writer, export filenames, and file export helper.
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from models.category_model import UNCATEGORIZED_LABEL, category_name_map
from models.prompt_model import millis_to_datetime

from .exceptions import ExportError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from collections.abc import Sequence
    from pathlib import Path

    from models.category_model import Category
    from models.prompt_model import Prompt

logger = logging.getLogger("promptvault.export")

CSV_HEADERS: tuple[str, ...] = (
    "Title",
    "Content",
    "Category",
    "Tags",
    "Favorite",
    "IsTemplate",
    "Created Date",
    "Updated Date",
)
TAG_SEPARATOR = "; "
BACKUP_FILENAME_PREFIX = "promptvault-backup"
SELECTION_FILENAME_PREFIX = "promptvault-export"


def escape_csv_cell(value: str) -> str:
    """Return *value* with embedded double quotes doubled."""
    return value.replace('"', '""')


def _quote(value: str) -> str:
    return f'"{escape_csv_cell(value)}"'


def _flag(value: bool) -> str:
    return "Yes" if value else "No"


def format_timestamp(value: int) -> str:
    """Render epoch milliseconds as an ISO-8601 UTC instant (``...T..:..:..sssZ``)."""
    moment = millis_to_datetime(value)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def resolve_category_name(category_id: str, names: dict[str, str]) -> str:
    """Return the display name for *category_id*, defaulting to Uncategorized."""
    if not category_id:
        return UNCATEGORIZED_LABEL
    return names.get(category_id) or UNCATEGORIZED_LABEL


def export_prompts_to_csv(prompts: Sequence[Prompt], categories: Sequence[Category]) -> str:
    """Return CSV text with one header row and one row per prompt."""
    names = category_name_map(categories)
    lines = [",".join(_quote(header) for header in CSV_HEADERS)]
    for prompt in prompts:
        cells = [
            _quote(prompt.title),
            _quote(prompt.content),
            _quote(resolve_category_name(prompt.category_id, names)),
            _quote(TAG_SEPARATOR.join(prompt.tags)),
            _flag(prompt.is_favorite),
            _flag(prompt.is_template),
            _quote(format_timestamp(prompt.created_at)),
            _quote(format_timestamp(prompt.updated_at)),
        ]
        lines.append(",".join(cells))
    return "\n".join(lines)


def export_filename(*, selected: bool = False, today: date | None = None) -> str:
    """Return the conventional export filename for a full backup or a selection."""
    stamp = (today or datetime.now(UTC).date()).isoformat()
    prefix = SELECTION_FILENAME_PREFIX if selected else BACKUP_FILENAME_PREFIX
    return f"{prefix}-{stamp}.csv"


def write_csv_export(
    path: Path,
    prompts: Sequence[Prompt],
    categories: Sequence[Category],
) -> Path:
    """Write the CSV export for *prompts* to *path* and return the resolved path."""
    resolved = path.expanduser()
    try:
        text = export_prompts_to_csv(prompts, categories)
        resolved.parent.mkdir(parents=True, exist_ok=True)
        resolved.write_text(text, encoding="utf-8")
    except (OSError, ValueError, OverflowError) as exc:
        logger.error("CSV export to %s failed: %s", resolved, exc)
        raise ExportError(f"Failed to export prompts to {resolved}") from exc
    logger.info("Exported %d prompt(s) to %s", len(prompts), resolved)
    return resolved


__all__ = [
    "CSV_HEADERS",
    "TAG_SEPARATOR",
    "escape_csv_cell",
    "export_filename",
    "export_prompts_to_csv",
    "format_timestamp",
    "resolve_category_name",
    "write_csv_export",
]
