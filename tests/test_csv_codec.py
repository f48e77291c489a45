"""Tests for CSV export formatting.

Updates: v0.1.1 - 2026-10-19 - Cover out-of-range timestamps during file export.
Updates: v0.1.0 - 2026-10-19 - Cover header, escaping, flags, timestamps, and file export.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from core.csv_codec import (
    CSV_HEADERS,
    escape_csv_cell,
    export_filename,
    export_prompts_to_csv,
    format_timestamp,
    write_csv_export,
)
from core.exceptions import ExportError
from models.category_model import Category
from models.prompt_model import Prompt

_HEADER_LINE = (
    '"Title","Content","Category","Tags","Favorite","IsTemplate","Created Date","Updated Date"'
)


def _prompt(**overrides: object) -> Prompt:
    values: dict[str, object] = {
        "id": "p1",
        "title": "Hello",
        "content": "World",
        "category_id": "c1",
        "tags": ["a", "b"],
        "is_favorite": True,
        "is_template": False,
        "created_at": 0,
        "updated_at": 1_500,
    }
    values.update(overrides)
    return Prompt(**values)  # type: ignore[arg-type]


def test_header_only_for_empty_collection() -> None:
    """Exporting nothing yields the header line and no trailing newline."""
    assert export_prompts_to_csv([], []) == _HEADER_LINE
    assert len(CSV_HEADERS) == 8


def test_row_layout_quotes_text_and_leaves_flags_bare() -> None:
    """Text cells are quoted while Favorite and IsTemplate are bare."""
    text = export_prompts_to_csv([_prompt()], [Category(id="c1", name="Work")])

    lines = text.split("\n")
    assert lines[0] == _HEADER_LINE
    assert lines[1] == (
        '"Hello","World","Work","a; b",Yes,No,'
        '"1970-01-01T00:00:00.000Z","1970-01-01T00:00:01.500Z"'
    )


def test_embedded_quotes_and_newlines_are_escaped() -> None:
    """Quotes are doubled and newlines survive inside the quoted cell."""
    prompt = _prompt(title='Say "hi"', content="line one\nline two, with comma")

    text = export_prompts_to_csv([prompt], [])

    assert '"Say ""hi"""' in text
    assert '"line one\nline two, with comma"' in text


def test_missing_or_dangling_category_exports_uncategorized() -> None:
    """Empty and unknown category ids render as Uncategorized."""
    prompts = [_prompt(id="a", category_id=""), _prompt(id="b", category_id="gone")]

    rows = export_prompts_to_csv(prompts, []).split("\n")[1:]

    assert all('"Uncategorized"' in row for row in rows)


def test_escape_csv_cell_doubles_quotes() -> None:
    """Only double quotes are altered."""
    assert escape_csv_cell('a"b, c') == 'a""b, c'


def test_format_timestamp_has_millisecond_precision() -> None:
    """Timestamps render with three fractional digits and a Z suffix."""
    assert format_timestamp(1_700_000_000_123) == "2023-11-14T22:13:20.123Z"


def test_export_filename_distinguishes_selection() -> None:
    """Full backups and selections use different prefixes."""
    today = date(2026, 1, 2)

    assert export_filename(today=today) == "promptvault-backup-2026-01-02.csv"
    assert export_filename(selected=True, today=today) == "promptvault-export-2026-01-02.csv"


def test_write_csv_export_creates_parent_directories(tmp_path: Path) -> None:
    """The export file is written as UTF-8 text beneath missing directories."""
    target = tmp_path / "nested" / "out.csv"

    resolved = write_csv_export(target, [_prompt(title="Zażółć")], [])

    assert resolved == target
    assert target.read_text(encoding="utf-8").split("\n")[1].startswith('"Zażółć"')


def test_write_csv_export_wraps_io_errors(tmp_path: Path) -> None:
    """Writing onto a directory raises ExportError."""
    with pytest.raises(ExportError):
        write_csv_export(tmp_path, [_prompt()], [])


@pytest.mark.parametrize("stamp", [10**17, 10**15])
def test_write_csv_export_wraps_out_of_range_timestamps(tmp_path: Path, stamp: int) -> None:
    """Stamps outside the datetime range fail as ExportError and leave no file."""
    prompt = Prompt(id="1", title="t", content="c", created_at=stamp, updated_at=stamp)
    target = tmp_path / "x.csv"

    with pytest.raises(ExportError) as excinfo:
        write_csv_export(target, [prompt], [])

    assert isinstance(excinfo.value.__cause__, OverflowError)
    assert not target.exists()
