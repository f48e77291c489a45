"""Argument parser for the PromptVault CLI.

Updates:
  v0.4.0 - 2026-10-19 - Replace catalogue, chain, and diagnostics commands with CSV import/export,
    search, and list commands.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from core.search import UNCATEGORIZED_FILTER, SortOption


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the PromptVault launcher."""
    parser = argparse.ArgumentParser(
        prog="promptvault",
        description="PromptVault prompt library",
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    import_parser = subparsers.add_parser(
        "import",
        help="Import prompts from a CSV file into the vault.",
    )
    import_parser.add_argument("path", type=Path, help="CSV file to import")

    export_parser = subparsers.add_parser(
        "export",
        help="Export prompts to a CSV file.",
    )
    export_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=None,
        help="Destination file or directory (defaults to a dated file in the export directory).",
    )
    export_parser.add_argument(
        "--selected",
        dest="selected_ids",
        nargs="+",
        default=None,
        metavar="ID",
        help="Export only the prompts with these ids.",
    )

    search_parser = subparsers.add_parser(
        "search",
        help="Search categories, tags, and prompts by substring.",
    )
    search_parser.add_argument("query", type=str, help="Text to look for (case-insensitive)")

    list_parser = subparsers.add_parser(
        "list",
        help="List prompts with optional filters.",
    )
    list_parser.add_argument(
        "--category",
        dest="category_id",
        default=None,
        help=f"Category id, or '{UNCATEGORIZED_FILTER}' for prompts without a category.",
    )
    list_parser.add_argument("--tag", default=None, help="Only prompts carrying this tag.")
    list_parser.add_argument(
        "--favorites",
        action="store_true",
        help="Only favourite prompts.",
    )
    list_parser.add_argument(
        "--sort",
        choices=[option.value for option in SortOption],
        default=SortOption.NEWEST.value,
        help="Ordering of the listed prompts (default: newest).",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for the PromptVault launcher."""
    return build_parser().parse_args(argv)
