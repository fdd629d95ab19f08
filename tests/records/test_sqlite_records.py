"""
Tests for SQLite record storage.
"""

import pytest

from docnotes.core.records import SQLiteRecordStorage
from docnotes.utils.exceptions import NotFoundError, RecordStorageError


@pytest.mark.unit
@pytest.mark.asyncio
class TestSQLiteRecordStorage:
    """Tests for SQLiteRecordStorage."""

    async def test_namespace_lifecycle(self, sqlite_records):
        assert await sqlite_records.namespace_exists("document-notes") is False

        await sqlite_records.create_namespace("document-notes")
        await sqlite_records.create_namespace("document-notes")

        assert await sqlite_records.namespace_exists("document-notes") is True

    async def test_write_then_read(self, sqlite_records):
        await sqlite_records.write("document-notes", "a.json", '{"x": 1}')

        assert await sqlite_records.read("document-notes", "a.json") == '{"x": 1}'
        assert await sqlite_records.exists("document-notes", "a.json") is True

    async def test_write_replaces_record(self, sqlite_records):
        await sqlite_records.write("ns", "a.json", "first")
        await sqlite_records.write("ns", "a.json", "second")

        assert await sqlite_records.read("ns", "a.json") == "second"

    async def test_write_registers_namespace(self, sqlite_records):
        await sqlite_records.write("implicit", "a.json", "x")

        assert await sqlite_records.namespace_exists("implicit") is True

    async def test_records_are_scoped_by_namespace(self, sqlite_records):
        await sqlite_records.write("one", "a.json", "from one")
        await sqlite_records.write("two", "a.json", "from two")

        assert await sqlite_records.read("one", "a.json") == "from one"
        assert await sqlite_records.read("two", "a.json") == "from two"

    async def test_read_missing_raises_not_found(self, sqlite_records):
        with pytest.raises(NotFoundError):
            await sqlite_records.read("ns", "missing.json")

    async def test_persists_across_connections(self, tmp_path):
        db_path = str(tmp_path / "persist.db")

        first = SQLiteRecordStorage(db_path=db_path)
        await first.initialize()
        await first.write("ns", "a.json", "kept")
        await first.close()

        second = SQLiteRecordStorage(db_path=db_path)
        await second.initialize()
        try:
            assert await second.read("ns", "a.json") == "kept"
        finally:
            await second.close()


@pytest.mark.unit
@pytest.mark.asyncio
class TestSQLiteRecordStorageFailures:
    """Database errors surface as RecordStorageError."""

    @pytest.mark.parametrize(
        "operation",
        [
            lambda storage: storage.initialize(),
            lambda storage: storage.namespace_exists("ns"),
            lambda storage: storage.create_namespace("ns"),
            lambda storage: storage.exists("ns", "a.json"),
            lambda storage: storage.read("ns", "a.json"),
            lambda storage: storage.write("ns", "a.json", "x"),
        ],
        ids=["initialize", "namespace_exists", "create_namespace", "exists", "read", "write"],
    )
    async def test_corrupt_database(self, corrupt_db_path, operation):
        storage = SQLiteRecordStorage(db_path=corrupt_db_path)

        with pytest.raises(RecordStorageError) as exc_info:
            await operation(storage)

        assert exc_info.value.context["db_path"] == corrupt_db_path
        # No half-open connection is kept around
        assert storage.connection is None

    async def test_missing_schema_on_read(self, tmp_path):
        storage = SQLiteRecordStorage(db_path=str(tmp_path / "empty.db"))
        try:
            with pytest.raises(RecordStorageError):
                await storage.read("ns", "a.json")
        finally:
            await storage.close()
