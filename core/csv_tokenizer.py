"""Permissive CSV tokenizer for spreadsheet-edited prompt exports.

The scanner honours RFC 4180 style quoting: quoted cells may contain commas,
newlines, and doubled quotes. It never raises on malformed input; an
unterminated quote simply swallows the rest of the text into the final cell.

Updates:
  v0.1.0 - 2026-10-19 - Add character-level tokenizer with multi-line quoted cells.
"""

from __future__ import annotations

__all__ = ["parse_csv"]


def _flush_row(row: list[str], cell: str, rows: list[list[str]]) -> None:
    """Append *row* plus its trailing *cell* to *rows* unless every cell is blank."""
    if not cell and not row:
        return
    row.append(cell.strip())
    if any(value for value in row):
        rows.append(row)


def parse_csv(text: str) -> list[list[str]]:
    """Return the rows of *text* as lists of trimmed cells.

    Fully blank lines are dropped. Row lengths are not normalised; callers map
    columns through the header row.
    """
    rows: list[list[str]] = []
    inside_quotes = False
    row: list[str] = []
    cell: list[str] = []

    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        index = 0
        length = len(line)
        while index < length:
            char = line[index]
            if char == '"':
                if inside_quotes and index + 1 < length and line[index + 1] == '"':
                    cell.append('"')
                    index += 1
                else:
                    inside_quotes = not inside_quotes
            elif char == "," and not inside_quotes:
                row.append("".join(cell).strip())
                cell = []
            else:
                cell.append(char)
            index += 1

        if inside_quotes:
            cell.append("\n")
            continue
        _flush_row(row, "".join(cell), rows)
        row = []
        cell = []

    # Only reachable with an unterminated quote.
    _flush_row(row, "".join(cell), rows)
    return rows
