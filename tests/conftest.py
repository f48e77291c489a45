"""Pytest configuration for shared test fixtures and environment hooks.

Updates:
  v0.2.0 - 2026-10-19 - Isolate PromptVault environment variables and working directory per test.
  v0.1.0 - 2025-12-10 - Force Qt offscreen platform for headless test runs.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from pytest import MonkeyPatch


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Run each test in its own directory without ambient PromptVault configuration."""
    for name in list(os.environ):
        if name.upper().startswith("PROMPTVAULT_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.chdir(tmp_path)
