"""
Filesystem record storage.

Namespaces are directories under a root, records are files inside them.
Writes go to a temp file in the same directory and are moved into place
with os.replace, so readers never see a half-written record.
"""

import asyncio
import os
import uuid
from pathlib import Path

from docnotes.core.records.base import RecordStorage
from docnotes.utils.exceptions import NotFoundError, RecordStorageError, ValidationError
from docnotes.utils.logger import get_logger

logger = get_logger(__name__)


def atomic_write_text(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """
    Atomic file write:
    - write to temp file in same directory
    - fsync
    - replace()

    The temp file is removed if anything fails before the replace.
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    tmp_path = parent / f".{path.name}.tmp-{uuid.uuid4().hex}"

    try:
        with open(tmp_path, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def _check_component(value: str, kind: str) -> str:
    """Reject names that would escape their directory."""
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise ValidationError(f"Invalid {kind}: {value!r}", context={kind: value})
    return value


class FileRecordStorage(RecordStorage):
    """Record storage backed by a directory tree."""

    def __init__(self, root: str | Path = "."):
        """
        Initialize filesystem record storage.

        Args:
            root: Directory under which namespaces are created
        """
        self.root = Path(root)

    def _namespace_path(self, namespace: str) -> Path:
        return self.root / _check_component(namespace, "namespace")

    def _record_path(self, namespace: str, name: str) -> Path:
        return self._namespace_path(namespace) / _check_component(name, "record name")

    async def initialize(self) -> None:
        """Create the root directory."""
        await asyncio.to_thread(self.root.mkdir, parents=True, exist_ok=True)
        logger.debug(f"File record storage ready at {self.root}")

    async def namespace_exists(self, namespace: str) -> bool:
        return await asyncio.to_thread(self._namespace_path(namespace).is_dir)

    async def create_namespace(self, namespace: str) -> None:
        path = self._namespace_path(namespace)
        try:
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise RecordStorageError(
                f"Failed to create namespace {namespace}: {e}",
                context={"namespace": namespace},
            ) from e

    async def exists(self, namespace: str, name: str) -> bool:
        return await asyncio.to_thread(self._record_path(namespace, name).is_file)

    async def read(self, namespace: str, name: str) -> str:
        path = self._record_path(namespace, name)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise NotFoundError(
                f"Record not found: {namespace}/{name}",
                context={"namespace": namespace, "name": name},
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise RecordStorageError(
                f"Failed to read record {namespace}/{name}: {e}",
                context={"namespace": namespace, "name": name},
            ) from e

    async def write(self, namespace: str, name: str, payload: str) -> None:
        path = self._record_path(namespace, name)
        try:
            await asyncio.to_thread(atomic_write_text, path, payload)
        except OSError as e:
            raise RecordStorageError(
                f"Failed to write record {namespace}/{name}: {e}",
                context={"namespace": namespace, "name": name},
            ) from e

    async def close(self) -> None:
        """Nothing to release for plain files."""
        pass
