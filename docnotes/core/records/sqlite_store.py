"""
SQLite record storage implementation using aiosqlite.

Each write is a single INSERT OR REPLACE committed in its own
transaction, which gives whole-record replacement semantics. Every
sqlite error, including an unopenable or corrupt database file, is
raised as RecordStorageError.
"""

from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from docnotes.core.records.base import RecordStorage
from docnotes.utils.exceptions import NotFoundError, RecordStorageError
from docnotes.utils.logger import get_logger

logger = get_logger(__name__)


class SQLiteRecordStorage(RecordStorage):
    """
    SQLite-based record storage.

    Features:
    - Single local database file
    - Namespaces tracked explicitly so folder-existence checks work
    - Transactional whole-record writes
    """

    def __init__(self, db_path: str = "data/docnotes.db"):
        """
        Initialize SQLite record storage.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """
        Establish connection to SQLite.

        Raises:
            RecordStorageError: If the database cannot be opened, e.g. the
                file is not a database or is locked
        """
        if self.connection is not None:
            return

        try:
            connection = await aiosqlite.connect(self.db_path)
        except aiosqlite.Error as e:
            raise RecordStorageError(
                f"Failed to open database {self.db_path}: {e}",
                context={"db_path": self.db_path},
            ) from e

        try:
            # First statement that touches the file; a corrupt database fails here
            if self.db_path != ":memory:":
                await connection.execute("PRAGMA journal_mode = WAL")
            await connection.commit()
        except aiosqlite.Error as e:
            # Closing stops the connection's worker thread
            await connection.close()
            raise RecordStorageError(
                f"Failed to open database {self.db_path}: {e}",
                context={"db_path": self.db_path},
            ) from e

        self.connection = connection

    async def _rollback(self) -> None:
        try:
            await self.connection.rollback()
        except aiosqlite.Error as e:
            logger.warning(f"Rollback failed on {self.db_path}: {e}")

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        try:
            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS namespaces (
                    name TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL
                )
            """
            )
            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS records (
                    namespace TEXT NOT NULL,
                    name TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (namespace, name)
                )
            """
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise RecordStorageError(
                f"Failed to create schema in {self.db_path}: {e}",
                context={"db_path": self.db_path},
            ) from e

        logger.debug(f"SQLite record storage ready at {self.db_path}")

    async def namespace_exists(self, namespace: str) -> bool:
        await self.connect()
        try:
            async with self.connection.execute(
                "SELECT 1 FROM namespaces WHERE name = ?", (namespace,)
            ) as cursor:
                return await cursor.fetchone() is not None
        except aiosqlite.Error as e:
            raise RecordStorageError(
                f"Failed to check namespace {namespace}: {e}",
                context={"namespace": namespace},
            ) from e

    async def create_namespace(self, namespace: str) -> None:
        await self.connect()
        try:
            await self.connection.execute(
                "INSERT OR IGNORE INTO namespaces (name, created_at) VALUES (?, ?)",
                (namespace, datetime.now(UTC).isoformat()),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            await self._rollback()
            raise RecordStorageError(
                f"Failed to create namespace {namespace}: {e}",
                context={"namespace": namespace},
            ) from e

    async def exists(self, namespace: str, name: str) -> bool:
        await self.connect()
        try:
            async with self.connection.execute(
                "SELECT 1 FROM records WHERE namespace = ? AND name = ?", (namespace, name)
            ) as cursor:
                return await cursor.fetchone() is not None
        except aiosqlite.Error as e:
            raise RecordStorageError(
                f"Failed to check record {namespace}/{name}: {e}",
                context={"namespace": namespace, "name": name},
            ) from e

    async def read(self, namespace: str, name: str) -> str:
        await self.connect()
        try:
            async with self.connection.execute(
                "SELECT payload FROM records WHERE namespace = ? AND name = ?",
                (namespace, name),
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise RecordStorageError(
                f"Failed to read record {namespace}/{name}: {e}",
                context={"namespace": namespace, "name": name},
            ) from e

        if row is None:
            raise NotFoundError(
                f"Record not found: {namespace}/{name}",
                context={"namespace": namespace, "name": name},
            )
        return row[0]

    async def write(self, namespace: str, name: str, payload: str) -> None:
        await self.connect()
        now = datetime.now(UTC).isoformat()
        try:
            await self.connection.execute(
                "INSERT OR IGNORE INTO namespaces (name, created_at) VALUES (?, ?)",
                (namespace, now),
            )
            await self.connection.execute(
                """
                INSERT OR REPLACE INTO records (namespace, name, payload, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (namespace, name, payload, now),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            await self._rollback()
            raise RecordStorageError(
                f"Failed to write record {namespace}/{name}: {e}",
                context={"namespace": namespace, "name": name},
            ) from e

    async def close(self) -> None:
        """Close the database connection."""
        if self.connection:
            await self.connection.close()
            self.connection = None
