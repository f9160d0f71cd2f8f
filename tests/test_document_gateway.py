"""Tests for the documents table gateway.

These tests verify:
- Schema bootstrap
- Lookup by key, optionally scoped to categories
- Insert / update / delete semantics
- Partition listing
- Store failures surface as StoreError
"""

import os
import sqlite3
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from docsync.clients import SqliteClient
from docsync.errors import StoreError
from docsync.models import DocumentFields, ManagedDocument
from docsync.services import DocumentGateway

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _fields(key, category="Docs", content="body", title=None):
    return DocumentFields(
        key=key,
        title=title or key,
        content=content,
        category=category,
        size=len(content.encode("utf-8")),
    )


class TestDocumentGateway:
    """Test DocumentGateway against a temporary SQLite database."""

    @pytest.fixture
    def temp_db_path(self):
        """Create a temporary database file for testing."""
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        yield path
        # Cleanup
        if os.path.exists(path):
            os.remove(path)

    @pytest.fixture
    def sqlite_client(self, temp_db_path):
        with SqliteClient(temp_db_path) as client:
            yield client

    @pytest.fixture
    def gateway(self, sqlite_client):
        gateway = DocumentGateway(sqlite_client)
        gateway.ensure_schema()
        return gateway

    def test_ensure_schema_is_repeatable(self, gateway):
        gateway.ensure_schema()

        assert gateway.list_by_partition("Docs") == []

    def test_insert_and_find(self, gateway):
        new_id = gateway.insert(_fields("guide.md", title="Guide"), T0)

        found = gateway.find_by_key("guide.md")

        assert isinstance(found, ManagedDocument)
        assert found.id == new_id
        assert found.key == "guide.md"
        assert found.title == "Guide"
        assert found.category == "Docs"
        assert found.size == 4
        assert found.created_at == T0
        assert found.updated_at == T0

        print(f"Inserted: {found}")

    def test_find_missing_key(self, gateway):
        assert gateway.find_by_key("missing.md") is None

    def test_find_is_case_sensitive(self, gateway):
        gateway.insert(_fields("Guide.md"), T0)

        assert gateway.find_by_key("guide.md") is None

    def test_find_scoped_to_categories(self, gateway):
        gateway.insert(_fields("shared.md", category="Notes"), T0)

        assert gateway.find_by_key("shared.md", categories=["Docs", "Research"]) is None
        assert gateway.find_by_key("shared.md", categories=["Notes"]) is not None
        assert gateway.find_by_key("shared.md", categories=[]) is None

    def test_update_keeps_id_and_created_at(self, gateway):
        new_id = gateway.insert(_fields("a.md", content="old"), T0)
        later = T0 + timedelta(minutes=5)

        gateway.update(new_id, _fields("a.md", content="new content", title="New"), later)

        updated = gateway.find_by_key("a.md")
        assert updated.id == new_id
        assert updated.content == "new content"
        assert updated.title == "New"
        assert updated.size == 11
        assert updated.created_at == T0
        assert updated.updated_at == later

    def test_update_can_change_category(self, gateway):
        new_id = gateway.insert(_fields("x.md"), T0)

        gateway.update(new_id, _fields("x.md", category="System"), T0)

        assert gateway.find_by_key("x.md").category == "System"

    def test_update_missing_row_raises(self, gateway):
        with pytest.raises(StoreError):
            gateway.update(9999, _fields("ghost.md"), T0)

    def test_delete(self, gateway):
        new_id = gateway.insert(_fields("b.md"), T0)

        assert gateway.delete(new_id) is True
        assert gateway.find_by_key("b.md") is None

    def test_delete_missing_row(self, gateway):
        assert gateway.delete(9999) is False

    def test_list_by_partition(self, gateway, sqlite_client):
        gateway.insert(_fields("a.md"), T0)
        gateway.insert(_fields("b.md"), T0)
        gateway.insert(_fields("r.md", category="Research"), T0)
        # Row authored in the viewer, without a file name
        sqlite_client.execute_query(
            """INSERT INTO documents (title, content, category, filename, size, created_at, updated_at)
               VALUES ('Manual', 'typed in the UI', 'Docs', NULL, 15, ?, ?)""",
            (T0.isoformat(), T0.isoformat()),
        )

        rows = gateway.list_by_partition("Docs")

        assert sorted(row.key for row in rows) == ["a.md", "b.md"]

    def test_rows_with_sqlite_timestamps_are_readable(self, gateway, sqlite_client):
        sqlite_client.execute_query(
            """INSERT INTO documents (title, content, category, filename, size, created_at, updated_at)
               VALUES ('Old', 'x', 'Docs', 'old.md', 1, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)"""
        )

        row = gateway.find_by_key("old.md")

        assert isinstance(row.created_at, datetime)

    def test_utc_z_suffix_timestamps_are_readable(self, gateway, sqlite_client):
        # Format written by JavaScript Date.toISOString()
        sqlite_client.execute_query(
            """INSERT INTO documents (title, content, category, filename, size, created_at, updated_at)
               VALUES ('Node', 'x', 'Docs', 'node.md', 1,
                       '2026-01-01T12:00:00.000Z', '2026-01-01T12:00:00.000Z')"""
        )

        row = gateway.find_by_key("node.md")

        assert row.created_at == T0
        assert row.updated_at == T0

    def test_unreadable_timestamp_raises_store_error(self, gateway, sqlite_client):
        sqlite_client.execute_query(
            """INSERT INTO documents (title, content, category, filename, size, created_at, updated_at)
               VALUES ('Odd', 'x', 'Docs', 'odd.md', 1, 'yesterday', 'yesterday')"""
        )

        with pytest.raises(StoreError):
            gateway.list_by_partition("Docs")

    def test_closed_connection_raises_store_error(self, temp_db_path):
        client = SqliteClient(temp_db_path)
        gateway = DocumentGateway(client)
        gateway.ensure_schema()
        client.close()

        with pytest.raises(StoreError):
            gateway.find_by_key("a.md")
        with pytest.raises(StoreError):
            gateway.insert(_fields("a.md"), T0)

    def test_missing_table_raises_store_error(self, sqlite_client):
        gateway = DocumentGateway(sqlite_client)

        with pytest.raises(StoreError):
            gateway.list_by_partition("Docs")


class TestSqliteClient:
    """Test SqliteClient connection management."""

    def test_context_manager_closes(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "nested", "bot.db")

            with SqliteClient(path) as client:
                client.execute_query("CREATE TABLE t (x INTEGER)")
                last_id, rowcount = client.execute_write("INSERT INTO t (x) VALUES (?)", (1,))
                assert last_id == 1
                assert rowcount == 1

            assert os.path.exists(path)
            with pytest.raises(sqlite3.ProgrammingError):
                client.connection

    def test_close_is_idempotent(self):
        client = SqliteClient(":memory:")
        client.close()
        client.close()

