"""
Factory for creating record storage backends.
"""

from docnotes.config import StorageConfig
from docnotes.core.records.base import RecordStorage
from docnotes.core.records.filesystem import FileRecordStorage
from docnotes.core.records.sqlite_store import SQLiteRecordStorage
from docnotes.utils.exceptions import ConfigurationError


class RecordStorageFactory:
    """Factory for creating record storage backends from configuration."""

    @staticmethod
    def create(config: StorageConfig) -> RecordStorage:
        """
        Create record storage from configuration.

        Args:
            config: Storage configuration

        Returns:
            Record storage instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.backend == "filesystem":
            return FileRecordStorage(root=config.root)
        elif config.backend == "sqlite":
            return SQLiteRecordStorage(db_path=config.sqlite_path)
        else:
            raise ConfigurationError(
                f"Unsupported storage backend: {config.backend}",
                context={"backend": config.backend},
            )
