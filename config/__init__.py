"""Configuration helpers for PromptVault.

Updates: v0.3.0 - 2026-10-19 - Expose storage settings in place of GUI and LiteLLM defaults.
Updates: v0.2.0 - 2025-11-03 - Expose settings loader and configuration error types.
Updates: v0.1.0 - 2025-10-30 - Package scaffold.
"""

from .settings import (
    DEFAULT_DATA_DIR,
    DEFAULT_REDIS_KEY_PREFIX,
    PromptVaultSettings,
    SettingsError,
    load_settings,
)

__all__ = [
    "DEFAULT_DATA_DIR",
    "DEFAULT_REDIS_KEY_PREFIX",
    "PromptVaultSettings",
    "SettingsError",
    "load_settings",
]
