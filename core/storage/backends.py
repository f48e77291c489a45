"""Primary and fallback key-value backends for the dual-backend store.

Primary backends are asynchronous and indexed (SQLite, Redis); fallback
backends are synchronous flat stores (a JSON document, or memory). Backends
raise :class:`~core.exceptions.StorageError` subclasses; the store decides
which failures to absorb.

Updates:
  v0.2.1 - 2026-10-19 - Remove the temporary file when a fallback write fails.
  v0.2.0 - 2026-10-19 - Replace Redis/Chroma bootstrap helpers with key-value backends.
  v0.1.0 - 2025-12-03 - Extract Redis/Chroma bootstrap helpers from package init.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import sqlite3
import tempfile
from contextlib import closing
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ..exceptions import (
    BackendReadError,
    BackendUnavailableError,
    BackendWriteError,
)

logger = logging.getLogger("promptvault.store.backends")

DEFAULT_TABLE = "promptvault_store"
DEFAULT_REDIS_PREFIX = "promptvault:"

__all__ = [
    "DEFAULT_REDIS_PREFIX",
    "DEFAULT_TABLE",
    "FallbackBackend",
    "JsonFileFallbackBackend",
    "MISSING",
    "MemoryFallbackBackend",
    "Missing",
    "PrimaryBackend",
    "RedisPrimaryBackend",
    "SQLitePrimaryBackend",
]


class Missing(Enum):
    """Sentinel type distinguishing an absent key from a stored ``None``."""

    MISSING = "missing"


MISSING = Missing.MISSING


class PrimaryBackend(Protocol):
    """Asynchronous backend consulted first on read."""

    async def open(self) -> None:
        """Prepare the backend; idempotent."""
        ...

    async def get(self, key: str) -> Any | Missing:
        """Return the stored value for *key* or ``MISSING``."""
        ...

    async def put(self, key: str, value: Any) -> None:
        """Persist *value* under *key*."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...


class FallbackBackend(Protocol):
    """Synchronous backend used as the durability backstop."""

    def get(self, key: str) -> Any | Missing:
        """Return the stored value for *key* or ``MISSING``."""
        ...

    def put(self, key: str, value: Any) -> None:
        """Persist *value* under *key*."""
        ...


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise BackendWriteError(f"Value for key '{key}' is not JSON serialisable") from exc


def _decode(key: str, payload: str | bytes) -> Any:
    text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise BackendReadError(f"Stored value for key '{key}' is not valid JSON") from exc


def _connect(db_path: Path) -> sqlite3.Connection:
    """Return a configured SQLite connection."""
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    return conn


class SQLitePrimaryBackend:
    """Indexed key-value table in SQLite, driven from worker threads.

    Each operation opens its own connection inside ``asyncio.to_thread`` so no
    connection is shared across threads.
    """

    def __init__(self, db_path: str | Path, *, table: str = DEFAULT_TABLE) -> None:
        if not table.isidentifier():
            raise ValueError(f"Invalid table name '{table}'")
        self._db_path = Path(db_path).expanduser()
        self._table = table
        self._opened = False

    @property
    def db_path(self) -> Path:
        """Location of the SQLite database file."""
        return self._db_path

    def _ensure_schema(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(_connect(self._db_path)) as conn, conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{self._table}_updated_at "
                f"ON {self._table} (updated_at)"
            )

    async def open(self) -> None:
        """Create the database file and table on first use."""
        if self._opened:
            return
        try:
            await asyncio.to_thread(self._ensure_schema)
        except (sqlite3.Error, OSError) as exc:
            raise BackendUnavailableError(
                f"Unable to open SQLite store at {self._db_path}"
            ) from exc
        self._opened = True

    def _select(self, key: str) -> str | None:
        with closing(_connect(self._db_path)) as conn:
            row = conn.execute(
                f"SELECT value FROM {self._table} WHERE key = ?",
                (key,),
            ).fetchone()
        return None if row is None else str(row[0])

    def _upsert(self, key: str, payload: str) -> None:
        with closing(_connect(self._db_path)) as conn, conn:
            conn.execute(
                f"""
                INSERT INTO {self._table} (key, value, updated_at)
                VALUES (?, ?, strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, payload),
            )

    async def get(self, key: str) -> Any | Missing:
        """Return the decoded value stored for *key*."""
        await self.open()
        try:
            payload = await asyncio.to_thread(self._select, key)
        except sqlite3.Error as exc:
            raise BackendReadError(f"Failed to read key '{key}' from SQLite") from exc
        if payload is None:
            return MISSING
        return _decode(key, payload)

    async def put(self, key: str, value: Any) -> None:
        """Upsert *value* under *key*."""
        await self.open()
        payload = _encode(key, value)
        try:
            await asyncio.to_thread(self._upsert, key, payload)
        except sqlite3.Error as exc:
            raise BackendWriteError(f"Failed to write key '{key}' to SQLite") from exc

    async def close(self) -> None:
        """Nothing to release; connections are per operation."""
        self._opened = False


class RedisPrimaryBackend:
    """JSON values stored under a key prefix in Redis."""

    def __init__(
        self,
        redis_dsn: str | None = None,
        *,
        client: aioredis.Redis | None = None,
        key_prefix: str = DEFAULT_REDIS_PREFIX,
    ) -> None:
        if client is None and not redis_dsn:
            raise ValueError("redis_dsn or client must be provided")
        self._redis_dsn = redis_dsn
        self._client = client
        self._key_prefix = key_prefix
        self._opened = False

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def _require_client(self) -> aioredis.Redis:
        if self._client is None:
            raise BackendUnavailableError("Redis client is not open")
        return self._client

    async def open(self) -> None:
        """Connect and ping the server."""
        if self._opened:
            return
        try:
            if self._client is None:
                self._client = aioredis.from_url(str(self._redis_dsn))
            await self._client.ping()
        except (RedisError, OSError, ValueError) as exc:
            raise BackendUnavailableError(
                f"Unable to connect to Redis at {self._redis_dsn or 'client'}"
            ) from exc
        self._opened = True

    async def get(self, key: str) -> Any | Missing:
        """Return the decoded value stored for *key*."""
        await self.open()
        client = self._require_client()
        try:
            payload = await client.get(self._key(key))
        except RedisError as exc:
            raise BackendReadError(f"Failed to read key '{key}' from Redis") from exc
        if payload is None:
            return MISSING
        return _decode(key, payload)

    async def put(self, key: str, value: Any) -> None:
        """Store *value* under *key*."""
        await self.open()
        client = self._require_client()
        payload = _encode(key, value)
        try:
            await client.set(self._key(key), payload)
        except RedisError as exc:
            raise BackendWriteError(f"Failed to write key '{key}' to Redis") from exc

    async def close(self) -> None:
        """Close the client connection pool."""
        if self._client is None:
            return
        try:
            await self._client.aclose()
        except RedisError as exc:
            logger.debug("Redis client close failed: %s", exc)
        self._opened = False


class JsonFileFallbackBackend:
    """Flat JSON document mapping keys to values."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        """Location of the JSON document."""
        return self._path

    def _read_document(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise BackendReadError(f"Unable to read fallback store {self._path}") from exc
        if not text.strip():
            return {}
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise BackendReadError(f"Fallback store {self._path} is not valid JSON") from exc
        if not isinstance(document, dict):
            raise BackendReadError(f"Fallback store {self._path} must contain a JSON object")
        return document

    def get(self, key: str) -> Any | Missing:
        """Return the value stored for *key*."""
        document = self._read_document()
        if key not in document:
            return MISSING
        return document[key]

    def put(self, key: str, value: Any) -> None:
        """Rewrite the document with *value* stored under *key*."""
        try:
            document = self._read_document()
        except BackendReadError as exc:
            logger.warning("Replacing unreadable fallback store %s: %s", self._path, exc)
            document = {}
        document[key] = value
        payload = _encode(key, document)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            handle, temp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", dir=str(self._path.parent)
            )
            try:
                with os.fdopen(handle, "w", encoding="utf-8") as stream:
                    stream.write(payload)
                os.replace(temp_name, self._path)
            except OSError:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise BackendWriteError(f"Unable to write fallback store {self._path}") from exc


class MemoryFallbackBackend:
    """Dict-backed fallback for ephemeral sessions and tests."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str) -> Any | Missing:
        """Return a copy of the value stored for *key*."""
        if key not in self._data:
            return MISSING
        return copy.deepcopy(self._data[key])

    def put(self, key: str, value: Any) -> None:
        """Store a copy of *value* under *key*."""
        self._data[key] = copy.deepcopy(value)
