"""Persistence layer for PromptVault collections.

Updates:
  v0.1.0 - 2026-10-19 - Expose the dual-backend store and its backends.
"""

from .backends import (
    MISSING,
    FallbackBackend,
    JsonFileFallbackBackend,
    MemoryFallbackBackend,
    Missing,
    PrimaryBackend,
    RedisPrimaryBackend,
    SQLitePrimaryBackend,
)
from .store import DualBackendStore, WritePolicy

__all__ = [
    "DualBackendStore",
    "FallbackBackend",
    "JsonFileFallbackBackend",
    "MISSING",
    "MemoryFallbackBackend",
    "Missing",
    "PrimaryBackend",
    "RedisPrimaryBackend",
    "SQLitePrimaryBackend",
    "WritePolicy",
]
