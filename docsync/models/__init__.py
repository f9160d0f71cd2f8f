"""Data models module."""

from docsync.models.managed_document import DocumentFields, DocumentMetadata, ManagedDocument
from docsync.models.run_report import RunPhase, RunReport

__all__ = ["DocumentFields", "DocumentMetadata", "ManagedDocument", "RunPhase", "RunReport"]
