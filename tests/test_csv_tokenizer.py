"""Tests for the permissive CSV tokenizer.

Updates: v0.1.0 - 2026-10-19 - Cover quoting, escaping, multi-line cells, and blank lines.
"""

from __future__ import annotations

from core.csv_tokenizer import parse_csv


def test_quoted_cell_keeps_embedded_commas() -> None:
    """Commas inside quotes belong to the cell."""
    assert parse_csv('a,"b,c",d') == [["a", "b,c", "d"]]


def test_doubled_quotes_inside_quotes_become_literal() -> None:
    """A doubled quote inside a quoted cell yields one quote character."""
    assert parse_csv('"he said ""hi"""') == [['he said "hi"']]


def test_quoted_cell_spans_lines() -> None:
    """Newlines inside quotes stay in the cell and do not end the row."""
    rows = parse_csv('"Title","Content"\n"One","line one\nline two"')

    assert rows == [["Title", "Content"], ["One", "line one\nline two"]]


def test_cells_are_trimmed() -> None:
    """Whitespace around cells is removed."""
    assert parse_csv("  a , b  ,c ") == [["a", "b", "c"]]


def test_blank_lines_are_dropped() -> None:
    """Empty lines and lines of empty cells produce no rows."""
    rows = parse_csv("a,b\n\n , \n\nc,d\n")

    assert rows == [["a", "b"], ["c", "d"]]


def test_empty_text_yields_no_rows() -> None:
    """Empty input returns an empty list."""
    assert parse_csv("") == []


def test_windows_line_endings_parse_like_unix() -> None:
    """A trailing carriage return is part of the line ending."""
    assert parse_csv("a,b\r\nc,d\r\n") == parse_csv("a,b\nc,d\n")


def test_row_lengths_are_not_normalised() -> None:
    """Rows keep however many cells they contain."""
    assert parse_csv("a,b,c\nd\ne,f") == [["a", "b", "c"], ["d"], ["e", "f"]]


def test_unterminated_quote_flushes_remaining_text() -> None:
    """An open quote at end of input swallows the rest without raising."""
    rows = parse_csv('a,"open cell\nstill open')

    assert rows == [["a", "open cell\nstill open"]]


def test_row_with_leading_empty_cells_is_kept() -> None:
    """A row is kept when any cell has content."""
    assert parse_csv(",,x") == [["", "", "x"]]
