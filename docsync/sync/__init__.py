"""Docs folder to documents table synchronization."""

from docsync.sync.metadata import (
    DEFAULT_CATEGORY_RULES,
    CategoryRule,
    assign_category,
    byte_size,
    derive_metadata,
    extract_title,
    keyword_rule,
    rules_from_config,
)
from docsync.sync.reconciler import Reconciler
from docsync.sync.source_files import has_extension, list_source_files, read_source_file

__all__ = [
    # Source enumeration
    "has_extension",
    "list_source_files",
    "read_source_file",
    # Metadata
    "DEFAULT_CATEGORY_RULES",
    "CategoryRule",
    "assign_category",
    "byte_size",
    "derive_metadata",
    "extract_title",
    "keyword_rule",
    "rules_from_config",
    # Reconciliation
    "Reconciler",
]
