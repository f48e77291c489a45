"""Factories for constructing PromptVault services from validated settings.

Updates:
  v0.9.0 - 2026-10-19 - Build dual-backend stores and vaults in place of PromptManager wiring.
  v0.8.8 - 2025-12-09 - Handle Redis cache availability gracefully and surface status in settings.
  v0.7.5-and-earlier - 2025-11-24 - Configure category and scenario wiring.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .storage import (
    DualBackendStore,
    JsonFileFallbackBackend,
    PrimaryBackend,
    RedisPrimaryBackend,
    SQLitePrimaryBackend,
    WritePolicy,
)
from .vault import PromptVault

if TYPE_CHECKING:  # pragma: no cover - typing only
    from redis.asyncio import Redis

    from config import PromptVaultSettings

factory_logger = logging.getLogger("promptvault.factory")


def build_primary_backend(
    settings: PromptVaultSettings,
    *,
    redis_client: Redis | None = None,
) -> PrimaryBackend | None:
    """Return the configured primary backend, or None for fallback-only mode."""
    if settings.primary_backend == "none":
        factory_logger.info("Primary store disabled; using the fallback store only")
        return None
    if settings.primary_backend == "redis":
        return RedisPrimaryBackend(
            settings.redis_dsn,
            client=redis_client,
            key_prefix=settings.redis_key_prefix,
        )
    if settings.db_path is None:  # pragma: no cover - resolved by settings validation
        raise ValueError("db_path is required for the SQLite backend")
    return SQLitePrimaryBackend(settings.db_path)


def build_store(
    settings: PromptVaultSettings,
    *,
    primary: PrimaryBackend | None = None,
    redis_client: Redis | None = None,
) -> DualBackendStore:
    """Return a dual-backend store wired from *settings*."""
    if primary is None:
        primary = build_primary_backend(settings, redis_client=redis_client)
    if settings.fallback_path is None:  # pragma: no cover - resolved by settings validation
        raise ValueError("fallback_path is required")
    fallback = JsonFileFallbackBackend(settings.fallback_path)
    policy = WritePolicy(settings.write_policy)
    factory_logger.debug(
        "Building store with %s primary, fallback %s, %s writes",
        settings.primary_backend,
        settings.fallback_path,
        policy.value,
    )
    return DualBackendStore(primary, fallback, write_policy=policy)


def build_vault(
    settings: PromptVaultSettings,
    *,
    store: DualBackendStore | None = None,
) -> PromptVault:
    """Return an unopened vault for *settings*; call ``await vault.open()`` before use."""
    return PromptVault(
        store or build_store(settings),
        seed_defaults=settings.seed_defaults,
        export_dir=settings.export_dir,
    )


__all__ = ["build_primary_backend", "build_store", "build_vault"]
