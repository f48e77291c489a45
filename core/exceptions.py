"""Common exception classes for core package.

This module centralises shared exception definitions for the **core**
package. Storage, export, and vault lookups raise these; import problems never
raise past the reconciler and are reported through ``ImportResult`` instead.

All exceptions ultimately inherit from :class:`PromptVaultError`, allowing
callers to catch a single base class for any vault-related failure while
still distinguishing individual error categories when needed.

Updates:
  v0.21.0 - 2026-10-19 - Reduce hierarchy to storage, export, and vault lookup errors.
  v0.14.0 - 2025-11-18 - Created module; migrated existing classes.
"""

from __future__ import annotations


class PromptVaultError(Exception):
    """Base exception for PromptVault failures."""


# ---------------------------------------------------------------------------
# Storage errors (raised by backends, absorbed by the dual-backend store)
# ---------------------------------------------------------------------------


class StorageError(PromptVaultError):
    """Raised when interactions with a persistent backend fail."""


class BackendUnavailableError(StorageError):
    """Raised when a backend cannot be opened."""


class BackendReadError(StorageError):
    """Raised when reading a key from a backend fails."""


class BackendWriteError(StorageError):
    """Raised when writing a key to a backend fails."""


class ExportError(PromptVaultError):
    """Raised when a CSV export cannot produce a file."""


class PromptNotFoundError(PromptVaultError):
    """Raised when a prompt id does not exist in the vault."""


class CategoryNotFoundError(PromptVaultError):
    """Raised when a category id does not exist in the vault."""


__all__ = [
    "BackendReadError",
    "BackendUnavailableError",
    "BackendWriteError",
    "CategoryNotFoundError",
    "ExportError",
    "PromptNotFoundError",
    "PromptVaultError",
    "StorageError",
]
