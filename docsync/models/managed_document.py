"""Models for rows mirrored from the docs folder into the documents table."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class DocumentMetadata:
    """Metadata derived from a source file's name and content."""

    title: str
    category: str
    size: int  # UTF-8 byte length of the content


@dataclass(frozen=True)
class DocumentFields:
    """Writable fields of a managed row, as produced from one source file."""

    key: str  # File base name, e.g. "guide.md"
    title: str
    content: str
    category: str
    size: int


@dataclass(frozen=True)
class ManagedDocument:
    """Represents one row of the documents table.

    Rows written by other producers share this shape; `key` is None for rows
    that did not come from a file.
    """

    id: int  # Assigned by the store on first insert
    key: Optional[str]  # Stored in the `filename` column
    title: str
    content: str
    category: str
    size: int
    created_at: Optional[datetime]  # First insert, never updated
    updated_at: Optional[datetime]  # Last insert or update
