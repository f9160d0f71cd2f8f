"""Destination gateway for the shared `documents` table.

Exposes the row operations the reconciler needs:
- Lookup by key (file name)
- Insert / update / delete of single rows
- Listing of one category partition

Every call commits on its own; there is no run-wide transaction.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Iterable, List, Optional

from ..clients import SqliteClient
from ..errors import StoreError
from ..models import DocumentFields, ManagedDocument

logger = logging.getLogger(__name__)

# SQL statements
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    category TEXT NOT NULL,
    filename TEXT,
    size INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_documents_filename ON documents(filename)
"""

SELECT_COLUMNS = "id, filename, title, content, category, size, created_at, updated_at"


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    # fromisoformat only accepts a trailing "Z" from Python 3.11
    if value[-1] in "Zz":
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise StoreError(f"Unreadable timestamp in documents table: {value!r}") from e


def _row_to_document(row) -> ManagedDocument:
    return ManagedDocument(
        id=row[0],
        key=row[1],
        title=row[2],
        content=row[3],
        category=row[4],
        size=row[5],
        created_at=_parse_timestamp(row[6]),
        updated_at=_parse_timestamp(row[7]),
    )


class DocumentGateway:
    """Row-level access to the documents table over an open SQLite handle."""

    def __init__(self, sqlite_client: SqliteClient):
        """Initialize the gateway.

        Args:
            sqlite_client: Open client; the caller owns its lifetime.
        """
        self._sqlite_client = sqlite_client

    def ensure_schema(self) -> None:
        """Create the documents table if it doesn't exist."""
        try:
            self._sqlite_client.execute_query(CREATE_TABLE_SQL)
            self._sqlite_client.execute_query(CREATE_INDEX_SQL)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to initialize documents table: {e}") from e
        logger.debug("Documents table initialized")

    def find_by_key(
        self,
        key: str,
        categories: Optional[Iterable[str]] = None,
    ) -> Optional[ManagedDocument]:
        """Get the first row stored under a key.

        Args:
            key: File base name.
            categories: If given, only rows in one of these categories match.

        Returns:
            ManagedDocument if found, None otherwise.
        """
        query = f"SELECT {SELECT_COLUMNS} FROM documents WHERE filename = ?"
        params: list = [key]
        if categories is not None:
            labels = list(categories)
            if not labels:
                return None
            query += f" AND category IN ({', '.join('?' for _ in labels)})"
            params.extend(labels)
        query += " ORDER BY id LIMIT 1"

        try:
            result = self._sqlite_client.execute_query(query, tuple(params))
        except sqlite3.Error as e:
            raise StoreError(f"Failed to look up document '{key}': {e}") from e

        if not result:
            return None
        return _row_to_document(result[0])

    def insert(self, fields: DocumentFields, now: datetime) -> int:
        """Insert a new row with created_at = updated_at = now.

        Returns:
            The id assigned by the store.
        """
        timestamp = now.isoformat()
        try:
            new_id, _ = self._sqlite_client.execute_write(
                """INSERT INTO documents
                   (title, content, category, filename, size, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    fields.title,
                    fields.content,
                    fields.category,
                    fields.key,
                    fields.size,
                    timestamp,
                    timestamp,
                ),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to insert document '{fields.key}': {e}") from e

        logger.debug(f"Inserted document {fields.key} as id {new_id}")
        return new_id

    def update(self, document_id: int, fields: DocumentFields, now: datetime) -> None:
        """Overwrite a row's derived fields; id and created_at are untouched.

        Raises:
            StoreError: If the write fails or the row no longer exists.
        """
        try:
            _, rowcount = self._sqlite_client.execute_write(
                """UPDATE documents
                   SET title = ?, content = ?, category = ?, size = ?, updated_at = ?
                   WHERE id = ?""",
                (
                    fields.title,
                    fields.content,
                    fields.category,
                    fields.size,
                    now.isoformat(),
                    document_id,
                ),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to update document '{fields.key}': {e}") from e

        if rowcount == 0:
            raise StoreError(
                f"Document '{fields.key}' (id {document_id}) disappeared before update"
            )
        logger.debug(f"Updated document {fields.key} (id {document_id})")

    def delete(self, document_id: int) -> bool:
        """Delete a row by id.

        Returns:
            True if a row was deleted, False if it was already gone.
        """
        try:
            _, rowcount = self._sqlite_client.execute_write(
                "DELETE FROM documents WHERE id = ?",
                (document_id,),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete document id {document_id}: {e}") from e

        return rowcount > 0

    def list_by_partition(self, category: str) -> List[ManagedDocument]:
        """List rows of one category that carry a key."""
        try:
            result = self._sqlite_client.execute_query(
                f"""SELECT {SELECT_COLUMNS} FROM documents
                    WHERE category = ? AND filename IS NOT NULL
                    ORDER BY id""",
                (category,),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list '{category}' documents: {e}") from e

        return [_row_to_document(row) for row in result]
