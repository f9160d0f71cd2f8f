"""Client modules for external services."""

from docsync.clients.sqlite_client import SqliteClient

__all__ = [
    "SqliteClient",
]
