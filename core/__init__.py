"""Core service layer for PromptVault.

Updates:
  v0.12.0 - 2026-10-19 - Export CSV interchange, dual-backend storage, search, and vault APIs.
  v0.3.0 - 2025-11-03 - Export factory helpers for shared bootstrap.
  v0.2.0-and-earlier - 2025-10-31 - Surface the initial service API.
"""

from models.category_model import Category
from models.prompt_model import Prompt

from .csv_codec import export_filename, export_prompts_to_csv, write_csv_export
from .csv_import import (
    ImportOutcome,
    ImportResult,
    import_csv_file,
    import_prompts_from_csv,
    reconcile_rows,
)
from .csv_tokenizer import parse_csv
from .exceptions import (
    BackendReadError,
    BackendUnavailableError,
    BackendWriteError,
    CategoryNotFoundError,
    ExportError,
    PromptNotFoundError,
    PromptVaultError,
    StorageError,
)
from .factory import build_store, build_vault
from .search import GroupedSearchResults, SortOption, filter_prompts, search_by_query, tag_counts
from .storage import DualBackendStore, WritePolicy
from .templating import extract_template_variables, fill_template
from .vault import PromptVault

__all__ = [
    "BackendReadError",
    "BackendUnavailableError",
    "BackendWriteError",
    "Category",
    "CategoryNotFoundError",
    "DualBackendStore",
    "ExportError",
    "GroupedSearchResults",
    "ImportOutcome",
    "ImportResult",
    "Prompt",
    "PromptNotFoundError",
    "PromptVault",
    "PromptVaultError",
    "SortOption",
    "StorageError",
    "WritePolicy",
    "build_store",
    "build_vault",
    "export_filename",
    "export_prompts_to_csv",
    "extract_template_variables",
    "fill_template",
    "filter_prompts",
    "import_csv_file",
    "import_prompts_from_csv",
    "parse_csv",
    "reconcile_rows",
    "search_by_query",
    "tag_counts",
    "write_csv_export",
]
