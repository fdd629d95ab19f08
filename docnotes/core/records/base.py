"""
Base interface for record storage.

A record is a named text payload inside a namespace (a folder for the
filesystem backend, a logical partition for SQLite). Note records are
always written whole, so backends only need read/replace semantics.
"""

from abc import ABC, abstractmethod


class RecordStorage(ABC):
    """Abstract base class for record storage implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create root directory or schema)."""
        pass

    @abstractmethod
    async def namespace_exists(self, namespace: str) -> bool:
        """
        Check whether a namespace exists.

        Args:
            namespace: Namespace name

        Returns:
            True if the namespace has been created
        """
        pass

    @abstractmethod
    async def create_namespace(self, namespace: str) -> None:
        """
        Create a namespace. Creating an existing namespace is a no-op.

        Args:
            namespace: Namespace name
        """
        pass

    @abstractmethod
    async def exists(self, namespace: str, name: str) -> bool:
        """
        Check whether a record exists.

        Args:
            namespace: Namespace name
            name: Record name

        Returns:
            True if the record exists
        """
        pass

    @abstractmethod
    async def read(self, namespace: str, name: str) -> str:
        """
        Read a record payload.

        Args:
            namespace: Namespace name
            name: Record name

        Returns:
            Record payload

        Raises:
            NotFoundError: If the record does not exist
            RecordStorageError: If the backend fails
        """
        pass

    @abstractmethod
    async def write(self, namespace: str, name: str, payload: str) -> None:
        """
        Replace a record payload atomically.

        A failed write must leave the previous payload (or no record)
        observable to later reads, never a partial one.

        Args:
            namespace: Namespace name
            name: Record name
            payload: Full record payload

        Raises:
            RecordStorageError: If the write fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass
