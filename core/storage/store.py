"""Dual-backend key-value store with an in-memory view.

Callers see their own writes immediately through :meth:`DualBackendStore.get`.
Writes reach the synchronous fallback backend in program order and the
asynchronous primary backend eventually; the two may diverge for a key if the
process stops between the writes. Backend failures are logged, never raised.

Updates:
  v0.15.1 - 2026-10-19 - Chain serial writes per key so both backends see saves in program order.
  v0.15.0 - 2026-10-19 - Replace repository proxy with primary/fallback dual-write store.
  v0.14.0 - 2025-11-18 - Initial scaffold with proxy implementation.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from .backends import MISSING

if TYPE_CHECKING:
    from collections.abc import Coroutine

    from .backends import FallbackBackend, Missing, PrimaryBackend

logger = logging.getLogger("promptvault.store")

__all__ = ["DualBackendStore", "WritePolicy"]


class WritePolicy(str, Enum):
    """Ordering between the fallback and primary writes of one save."""

    CONCURRENT = "concurrent"
    SERIAL = "serial"


class DualBackendStore:
    """Keyed persistence over an async primary and a sync fallback backend."""

    def __init__(
        self,
        primary: PrimaryBackend | None,
        fallback: FallbackBackend,
        *,
        write_policy: WritePolicy | str = WritePolicy.CONCURRENT,
    ) -> None:
        self._primary = primary
        self._fallback = fallback
        self._write_policy = WritePolicy(write_policy)
        self._values: dict[str, Any] = {}
        self._versions: dict[str, int] = {}
        self._pending: set[asyncio.Task[None]] = set()
        # Last serial write per key; the next one waits for it.
        self._tails: dict[str, asyncio.Task[None]] = {}

    @property
    def write_policy(self) -> WritePolicy:
        """Configured ordering between fallback and primary writes."""
        return self._write_policy

    @property
    def pending_writes(self) -> int:
        """Number of primary writes scheduled but not yet finished."""
        return len(self._pending)

    # Reads ------------------------------------------------------------- #

    async def _primary_backend(self) -> PrimaryBackend | None:
        if self._primary is None:
            return None
        try:
            await self._primary.open()
        except Exception as exc:  # noqa: BLE001 - degraded to fallback
            logger.warning("Primary store unavailable: %s", exc)
            return None
        return self._primary

    async def _read_primary(self, key: str) -> Any | Missing:
        primary = await self._primary_backend()
        if primary is None:
            return MISSING
        try:
            return await primary.get(key)
        except Exception as exc:  # noqa: BLE001 - degraded to fallback
            logger.warning("Primary read failed: %s", exc, extra={"key": key})
            return MISSING

    def _read_fallback(self, key: str) -> Any | Missing:
        try:
            return self._fallback.get(key)
        except Exception as exc:  # noqa: BLE001 - degraded to default
            logger.warning("Fallback read failed: %s", exc, extra={"key": key})
            return MISSING

    async def load(self, key: str, default: Any = None) -> Any:
        """Return the persisted value for *key*, or *default* when nothing is stored.

        The primary backend wins when it holds a value; otherwise the fallback
        is consulted. A save issued while the load is in flight takes
        precedence over the loaded value.
        """
        version = self._versions.get(key, 0)
        value = await self._read_primary(key)
        source = "primary"
        if value is MISSING:
            value = self._read_fallback(key)
            source = "fallback"
        if value is MISSING:
            value = default
            source = "default"
        if self._versions.get(key, 0) != version:
            logger.debug("Discarding stale load superseded by a save", extra={"key": key})
            return self._values[key]
        self._values[key] = value
        logger.debug("Loaded key from %s", source, extra={"key": key})
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the in-memory value for *key* without touching the backends."""
        return self._values.get(key, default)

    # Writes ------------------------------------------------------------ #

    def save(self, key: str, value: Any | Callable[[Any], Any]) -> None:
        """Record *value* for *key* and persist it to both backends.

        *value* may be a callable receiving the current value and returning
        the new one. Returns before the primary write completes.
        """
        if callable(value):
            value = value(self._values.get(key))
        self._values[key] = value
        self._versions[key] = self._versions.get(key, 0) + 1
        snapshot = copy.deepcopy(value)

        if self._write_policy is WritePolicy.CONCURRENT:
            self._write_fallback(key, snapshot)
            self._schedule(self._write_primary(key, snapshot, then_fallback=False))
            return

        task = self._schedule(self._write_serial(key, snapshot, self._tails.get(key)))
        if task is None:
            self._tails.pop(key, None)
            return
        self._tails[key] = task
        task.add_done_callback(lambda done: self._release_tail(key, done))

    def _release_tail(self, key: str, task: asyncio.Task[None]) -> None:
        if self._tails.get(key) is task:
            del self._tails[key]

    async def _write_serial(
        self,
        key: str,
        value: Any,
        previous: asyncio.Task[None] | None,
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.gather(previous, return_exceptions=True)
        await self._write_primary(key, value, then_fallback=True)

    def _write_fallback(self, key: str, value: Any) -> None:
        try:
            self._fallback.put(key, value)
        except Exception as exc:  # noqa: BLE001 - best-effort durability
            logger.warning("Fallback write failed: %s", exc, extra={"key": key})

    async def _write_primary(self, key: str, value: Any, *, then_fallback: bool) -> None:
        try:
            primary = await self._primary_backend()
            if primary is not None:
                try:
                    await primary.put(key, value)
                except Exception as exc:  # noqa: BLE001 - best-effort durability
                    logger.warning("Primary write failed: %s", exc, extra={"key": key})
        finally:
            if then_fallback:
                self._write_fallback(key, value)

    def _schedule(self, operation: Coroutine[Any, Any, None]) -> asyncio.Task[None] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(operation)
            return None
        task = loop.create_task(operation)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def flush(self) -> None:
        """Wait for every scheduled primary write to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Flush pending writes and release the primary backend."""
        await self.flush()
        if self._primary is None:
            return
        try:
            await self._primary.close()
        except Exception as exc:  # noqa: BLE001 - shutdown path
            logger.debug("Primary store close failed: %s", exc)
