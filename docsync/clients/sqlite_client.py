import logging
import sqlite3
from pathlib import Path
from sqlite3 import Connection
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class SqliteClient:
    """SQLite database client with connection management."""

    def __init__(self, connection_string: str):
        self.connection_string = connection_string
        if connection_string != ":memory:":
            Path(connection_string).parent.mkdir(parents=True, exist_ok=True)
        self._connection: Optional[Connection] = sqlite3.connect(self.connection_string)
        logger.debug(f"Opened SQLite database: {connection_string}")

    @property
    def connection(self) -> Connection:
        """Get the database connection."""
        if self._connection is None:
            raise sqlite3.ProgrammingError("Cannot operate on a closed database.")
        return self._connection

    def execute_query(self, query: str, params=None):
        """Execute a query and return all results."""
        cursor = self.connection.cursor()
        try:
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)

            # Commit for write operations (INSERT, UPDATE, DELETE, CREATE)
            if query.strip().upper().startswith(("INSERT", "UPDATE", "DELETE", "CREATE")):
                self.connection.commit()

            return cursor.fetchall()
        finally:
            cursor.close()

    def execute_write(self, query: str, params=None) -> Tuple[Optional[int], int]:
        """Execute a single write statement and commit it.

        Returns:
            Tuple of (lastrowid, rowcount).
        """
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params or ())
            self.connection.commit()
            return cursor.lastrowid, cursor.rowcount
        except sqlite3.Error:
            self.connection.rollback()
            raise
        finally:
            cursor.close()

    def close(self):
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed SQLite database: {self.connection_string}")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.close()
        return False
