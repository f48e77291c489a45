"""CLI command handlers for PromptVault.

Handlers receive an opened :class:`~core.vault.PromptVault`, the parsed
arguments, and the CLI logger, and return a process exit code.

Updates:
  v0.40.1 - 2026-10-19 - Report import counts through ImportResult.summary.
  v0.40.0 - 2026-10-19 - Replace catalogue, benchmark, and chain handlers with CSV import/export,
    search, and list commands running on the event loop.
  v0.32.0 - 2025-12-04 - Reuse shared chain_from_payload helper for JSON imports.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from core.csv_codec import resolve_category_name
from core.exceptions import ExportError
from models.category_model import category_name_map

from .utils import print_and_log, shorten

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from core.vault import PromptVault
    from models.prompt_model import Prompt

CommandHandler = Callable[["PromptVault", argparse.Namespace, logging.Logger], Awaitable[int]]


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler


def _format_prompt_line(prompt: Prompt, names: dict[str, str]) -> str:
    marker = "*" if prompt.is_favorite else " "
    category = resolve_category_name(prompt.category_id, names)
    tags = f" [{', '.join(prompt.tags)}]" if prompt.tags else ""
    template = " (template)" if prompt.is_template else ""
    return f"{marker} {prompt.id}  {shorten(prompt.title, 48)}  <{category}>{tags}{template}"


async def run_import(
    vault: PromptVault,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    path = Path(args.path).expanduser()
    result = await vault.import_csv(path)
    for error in result.errors:
        print_and_log(logger, logging.ERROR, f"Error: {error}")
    for warning in result.warnings:
        print(f"Warning: {warning}")
    if not result.success:
        return 1
    counts = result.summary()
    print_and_log(
        logger,
        logging.INFO,
        f"Imported {counts['imported']} prompt(s) from {path} "
        f"with {counts['warnings']} warning(s)",
    )
    return 0


async def run_export(
    vault: PromptVault,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    path_value = getattr(args, "path", None)
    path = Path(path_value).expanduser() if path_value is not None else None
    selected_ids = getattr(args, "selected_ids", None)
    try:
        resolved = vault.export_csv(path, selected_ids)
    except ExportError as exc:
        cause = exc.__cause__ or exc
        print_and_log(logger, logging.ERROR, f"Failed to export prompts: {cause}")
        return 1
    print_and_log(logger, logging.INFO, f"Prompts exported to {resolved}")
    return 0


async def run_search(
    vault: PromptVault,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del logger
    results = vault.search(args.query)
    if results.is_empty():
        print(f"No matches for '{args.query}'")
        return 0

    names = category_name_map(vault.categories)
    if results.categories:
        print("Categories:")
        for category in results.categories:
            print(f"  {category.id}  {category.name}")
    if results.tags:
        print("Tags:")
        print("  " + ", ".join(results.tags))
    if results.prompts:
        print("Prompts:")
        for prompt in results.prompts:
            print("  " + _format_prompt_line(prompt, names))
    return 0


async def run_list(
    vault: PromptVault,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del logger
    prompts = vault.filter(
        category_id=getattr(args, "category_id", None),
        tag=getattr(args, "tag", None),
        favorites_only=bool(getattr(args, "favorites", False)),
        sort=getattr(args, "sort", "newest"),
    )
    names = category_name_map(vault.categories)
    for prompt in prompts:
        print(_format_prompt_line(prompt, names))
    noun = "prompt" if len(prompts) == 1 else "prompts"
    print(f"{len(prompts)} {noun} found")
    return 0


COMMAND_SPECS: dict[str | None, CommandSpec] = {
    "import": CommandSpec(run_import),
    "export": CommandSpec(run_export),
    "search": CommandSpec(run_search),
    "list": CommandSpec(run_list),
}


__all__ = ["COMMAND_SPECS", "CommandSpec"]
