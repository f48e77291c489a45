"""Printable summaries for PromptVault configuration.

Updates:
  v0.2.0 - 2026-10-19 - Summarise storage backends and export settings.
  v0.1.0 - 2025-12-04 - Extract CLI settings summary rendering.
"""

from __future__ import annotations

from config import PromptVaultSettings

from .utils import describe_path, mask_dsn


def print_settings_summary(settings: PromptVaultSettings) -> None:
    """Emit a readable summary of storage configuration and health checks."""
    primary = settings.primary_backend
    if primary == "sqlite":
        primary_line = "Database path: " + describe_path(
            settings.db_path,
            expect_directory=False,
            allow_missing_file=True,
        )
    elif primary == "redis":
        primary_line = f"Redis DSN: {mask_dsn(settings.redis_dsn)}"
    else:
        primary_line = "Primary store disabled (fallback only)"

    lines = [
        "PromptVault configuration summary",
        "---------------------------------",
        f"Data directory: {describe_path(settings.data_dir, expect_directory=True)}",
        f"Primary backend: {primary}",
        primary_line,
    ]
    if primary == "redis":
        lines.append(f"Redis key prefix: {settings.redis_key_prefix}")
    lines.extend(
        [
            "Fallback store: "
            + describe_path(settings.fallback_path, expect_directory=False, allow_missing_file=True),
            f"Write policy: {settings.write_policy}",
            "",
            "CSV export",
            "----------",
            "Export directory: "
            + (
                describe_path(settings.export_dir, expect_directory=True)
                if settings.export_dir is not None
                else "working directory"
            ),
            f"Seed sample data: {'yes' if settings.seed_defaults else 'no'}",
        ]
    )
    print("\n".join(lines))


__all__ = ["print_settings_summary"]
