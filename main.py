"""Application entry point for PromptVault.

Updates:
  v0.10.0 - 2026-10-19 - Run vault commands on a single event loop; drop GUI launcher and
    LiteLLM bootstrap.
  v0.9.1 - 2025-12-05 - Remove duplicate COMMAND_SPECS import flagged by Ruff.
  v0.9.0 - 2025-12-04 - Modularise CLI parsing, commands, and GUI launcher helpers.
  v0.8.2 - 2025-11-29 - Reformat CLI summary output and modernise type hints.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from cli.commands import COMMAND_SPECS
from cli.parser import parse_args
from cli.runtime import setup_logging
from cli.settings_summary import print_settings_summary
from config import SettingsError, load_settings
from core import build_vault

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from cli.commands import CommandSpec
    from config import PromptVaultSettings


async def _run_command(
    settings: PromptVaultSettings,
    spec: CommandSpec,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    vault = build_vault(settings)
    await vault.open()
    try:
        return await spec.handler(vault, args, logger)
    finally:
        await vault.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, the vault, and CLI commands."""
    args = parse_args(argv)
    setup_logging(args.logging_config)

    logger = logging.getLogger("promptvault.main")
    try:
        settings = load_settings()
    except SettingsError as exc:
        cause = exc.__cause__
        logger.error("Failed to load settings: %s", f"{exc}: {cause}" if cause else exc)
        return 2

    if args.print_settings:
        print_settings_summary(settings)
        return 0

    command = getattr(args, "command", None)
    spec = COMMAND_SPECS.get(command)
    if spec is None:
        print("No command given. Run 'promptvault --help' for usage.")
        return 1

    try:
        return asyncio.run(_run_command(settings, spec, args, logger))
    except (OSError, ValueError) as exc:
        logger.error("Command '%s' failed: %s", command, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
