"""Settings management utilities for PromptVault configuration.

Updates:
  v0.6.0 - 2026-10-19 - Replace LiteLLM/GUI options with storage backend, write policy, and
    export settings; load .env values through python-dotenv.
  v0.5.9 - 2025-12-05 - Tighten dotenv helpers for lint compliance.
  v0.5.7 - 2025-12-04 - Load .env secrets so web search keys persist like LiteLLM keys.
  v0.5.2-and-earlier - 2025-11-30 - Earlier routing, template override, and refinement settings.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, cast

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger("promptvault.settings")

_DOTENV_DEFAULT_PATH = ".env"

DEFAULT_DATA_DIR = Path("data")
DEFAULT_DB_FILENAME = "promptvault.db"
DEFAULT_FALLBACK_FILENAME = "promptvault.json"
DEFAULT_REDIS_KEY_PREFIX = "promptvault:"

PrimaryBackendName = Literal["sqlite", "redis", "none"]
WritePolicyName = Literal["concurrent", "serial"]

# Environment keys per field, looked up with the PROMPTVAULT_ prefix.
_ENV_KEYS: dict[str, tuple[str, ...]] = {
    "data_dir": ("DATA_DIR",),
    "primary_backend": ("PRIMARY_BACKEND", "BACKEND"),
    "db_path": ("DB_PATH", "DATABASE_PATH"),
    "redis_dsn": ("REDIS_DSN", "REDIS_URL"),
    "redis_key_prefix": ("REDIS_KEY_PREFIX",),
    "fallback_path": ("FALLBACK_PATH",),
    "write_policy": ("WRITE_POLICY",),
    "export_dir": ("EXPORT_DIR",),
    "seed_defaults": ("SEED_DEFAULTS",),
}

# Keys honoured without the prefix.
_UNPREFIXED_ENV_KEYS: dict[str, tuple[str, ...]] = {
    "redis_dsn": ("REDIS_URL",),
}


class SettingsError(Exception):
    """Raised when PromptVault configuration cannot be loaded or validated."""


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    env_file_override = os.getenv("PROMPTVAULT_ENV_FILE")
    if env_file_override is not None:
        candidate = env_file_override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_DEFAULT_PATH).expanduser()
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


def _optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return Path(text).expanduser().resolve()


class PromptVaultSettings(BaseSettings):
    """Application configuration sourced from keyword arguments, JSON, or the environment."""

    data_dir: Path = Field(
        default=DEFAULT_DATA_DIR,
        description="Directory holding the SQLite database and the JSON fallback store.",
    )
    primary_backend: PrimaryBackendName = Field(
        default="sqlite",
        description="Asynchronous primary store: sqlite, redis, or none (fallback only).",
    )
    db_path: Path | None = Field(
        default=None,
        description="SQLite database file; defaults to <data_dir>/promptvault.db.",
    )
    redis_dsn: str | None = Field(default=None, repr=False)
    redis_key_prefix: str = Field(default=DEFAULT_REDIS_KEY_PREFIX)
    fallback_path: Path | None = Field(
        default=None,
        description="JSON fallback document; defaults to <data_dir>/promptvault.json.",
    )
    write_policy: WritePolicyName = Field(
        default="concurrent",
        description="concurrent writes the fallback immediately; serial waits for the primary.",
    )
    export_dir: Path | None = Field(
        default=None,
        description="Directory for dated CSV exports; defaults to the working directory.",
    )
    seed_defaults: bool = Field(
        default=True,
        description="Seed sample categories and prompts when the store is empty.",
    )

    model_config = cast(
        "SettingsConfigDict",
        {
            "env_prefix": "PROMPTVAULT_",
            "case_sensitive": False,
            "populate_by_name": True,
        },
    )

    @field_validator("data_dir", mode="before")
    def _normalise_data_dir(cls, value: Any) -> Path:
        """Expand user-relative paths and coerce values to Path instances."""
        path = _optional_path(value)
        if path is None:
            raise ValueError("a filesystem path is required")
        return path

    @field_validator("db_path", "fallback_path", "export_dir", mode="before")
    def _normalise_optional_path(cls, value: Any) -> Path | None:
        """Coerce optional paths, treating blank values as unset."""
        return _optional_path(value)

    @field_validator("redis_dsn", mode="before")
    def _trim_redis_dsn(cls, value: str | None) -> str | None:
        """Normalise Redis DSN values by stripping whitespace and empty strings."""
        if value is None:
            return None
        stripped = str(value).strip()
        return stripped or None

    @field_validator("primary_backend", "write_policy", mode="before")
    def _normalise_choice(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("redis_key_prefix")
    def _validate_key_prefix(cls, value: str) -> str:
        """Reject whitespace-only prefixes."""
        if value and not value.strip():
            raise ValueError("redis_key_prefix must not be blank")
        return value

    @model_validator(mode="after")
    def _resolve_storage_paths(self) -> PromptVaultSettings:
        """Derive storage file locations and check backend requirements."""
        if self.db_path is None:
            self.db_path = self.data_dir / DEFAULT_DB_FILENAME
        if self.fallback_path is None:
            self.fallback_path = self.data_dir / DEFAULT_FALLBACK_FILENAME
        if self.primary_backend == "redis" and not self.redis_dsn:
            raise ValueError("redis_dsn is required when primary_backend is 'redis'")
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        """Define configuration source precedence.

        Order (highest → lowest):
            1. Explicit keyword arguments (e.g. load_settings(write_policy="serial")).
            2. JSON configuration file.
            3. Environment variables and ``.env`` values.
            4. File secrets.
        """

        def env_with_aliases(_: BaseSettings | None = None) -> dict[str, Any]:
            data: dict[str, Any] = {}
            config_dict = cast("dict[str, Any]", cls.model_config)
            prefix = str(config_dict.get("env_prefix", ""))
            dotenv_data = _read_dotenv_values()

            def _lookup(candidate: str) -> str | None:
                value = os.getenv(candidate)
                if value is None:
                    value = dotenv_data.get(candidate)
                if value is None:
                    return None
                stripped_value = str(value).strip()
                return stripped_value or None

            for field, keys in _ENV_KEYS.items():
                candidates = [f"{prefix}{key}" for key in keys]
                candidates.extend(_UNPREFIXED_ENV_KEYS.get(field, ()))
                for candidate in candidates:
                    val = _lookup(candidate)
                    if val is not None:
                        data[field] = val
                        break
            return data

        return (
            init_settings,
            cls._json_config_settings_source(settings_cls),
            cast("PydanticBaseSettingsSource", env_with_aliases),
            file_secret_settings,
        )

    @classmethod
    def _json_config_settings_source(
        cls,
        _: type[BaseSettings],
    ) -> PydanticBaseSettingsSource:
        """Return settings extracted from an optional JSON config file."""

        def _loader(_: BaseSettings | None = None) -> dict[str, Any]:
            explicit_path = os.getenv("PROMPTVAULT_CONFIG_JSON")
            candidates: list[Path] = []
            if explicit_path:
                candidates.append(Path(explicit_path).expanduser())
            candidates.append((Path("config") / "config.json").expanduser())

            for path in candidates:
                if not path.exists():
                    if explicit_path and path == candidates[0]:
                        raise SettingsError(f"Configuration file not found: {path}")
                    continue
                try:
                    raw_contents = path.read_text(encoding="utf-8")
                except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
                    raise SettingsError(f"Unable to read configuration file: {path}") from exc
                try:
                    data = json.loads(raw_contents)
                except json.JSONDecodeError as exc:
                    raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
                if not isinstance(data, dict):
                    message = f"Configuration file {path} must contain a JSON object"
                    raise SettingsError(message)
                mapping_data = cast("Mapping[object, Any]", data)
                data_dict: dict[str, Any] = {str(key): value for key, value in mapping_data.items()}
                if "redis_dsn" in data_dict:
                    logger.warning(
                        "Ignoring redis_dsn in configuration file %s; "
                        "set credentials via environment variables instead.",
                        path,
                    )
                    data_dict.pop("redis_dsn")
                mapped: dict[str, Any] = {}
                if "database_path" in data_dict and "db_path" not in data_dict:
                    mapped["db_path"] = data_dict["database_path"]
                for key in _ENV_KEYS:
                    if key in data_dict and key != "redis_dsn":
                        mapped[key] = data_dict[key]
                return mapped
            return {}

        return cast("PydanticBaseSettingsSource", _loader)


def load_settings(**overrides: Any) -> PromptVaultSettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return PromptVaultSettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError("Invalid PromptVault configuration") from exc


__all__ = [
    "DEFAULT_DATA_DIR",
    "DEFAULT_REDIS_KEY_PREFIX",
    "PromptVaultSettings",
    "SettingsError",
    "load_settings",
]
