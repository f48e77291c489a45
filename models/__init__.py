"""Data models for PromptVault.

Updates: v0.6.0 - 2026-10-19 - Export Category and the reshaped Prompt record only.
Updates: v0.1.0 - 2025-10-30 - Export Prompt dataclass.
"""

from .category_model import UNCATEGORIZED_LABEL, Category
from .prompt_model import Prompt

__all__ = [
    "Category",
    "Prompt",
    "UNCATEGORIZED_LABEL",
]
