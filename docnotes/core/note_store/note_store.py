"""
Note persistence keyed by document identity.

One record per document, named after a filesystem-safe storage key and
kept in a dedicated notes folder. Records are always rewritten whole.

Failures never escape this module as exceptions:
- load() collapses "no record" and "corrupt record" into None
- save() reports failures through SaveResult
"""

import json
import re
from collections.abc import Iterable

from pydantic import ValidationError as PydanticValidationError

from docnotes.core.host.base import DocumentHost
from docnotes.models.note import DocumentNoteCollection, Note
from docnotes.models.storage import SaveResult
from docnotes.utils.exceptions import (
    DocNotesError,
    NotFoundError,
    RecordStorageError,
    ValidationError,
)
from docnotes.utils.logger import get_logger

logger = get_logger(__name__)

# Path separators and the drive separator
_UNSAFE_KEY_CHARS = re.compile(r"[/\\:]")
_KEY_SUBSTITUTE = "_"


class NoteStore:
    """
    Load and save the note collection of a document.

    Storage keys are derived by replacing `/`, `\\` and `:` with `_`.
    This is deterministic but not strictly injective: `a/b.md` and
    `a_b.md` map to the same key.
    """

    def __init__(self, host: DocumentHost, notes_folder: str = "document-notes"):
        """
        Initialize NoteStore.

        Args:
            host: Document host providing record primitives
            notes_folder: Folder holding one record per document
        """
        self.host = host
        self.notes_folder = notes_folder
        self._folder_ready = False

    @staticmethod
    def derive_storage_key(document_identity: str) -> str:
        """
        Map a document identity to a filesystem-safe key.

        Args:
            document_identity: Path-like document identifier

        Returns:
            Storage key

        Raises:
            ValidationError: If the identity is empty
        """
        if not document_identity:
            raise ValidationError("Document identity cannot be empty")
        return _UNSAFE_KEY_CHARS.sub(_KEY_SUBSTITUTE, document_identity)

    def record_name(self, document_identity: str) -> str:
        return f"{self.derive_storage_key(document_identity)}.json"

    def record_path(self, document_identity: str) -> str:
        """Folder-qualified record name, for logs and results."""
        return f"{self.notes_folder}/{self.record_name(document_identity)}"

    async def ensure_folder(self) -> None:
        """Create the notes folder if it does not exist yet."""
        if self._folder_ready:
            return
        if not await self.host.folder_exists(self.notes_folder):
            await self.host.create_folder(self.notes_folder)
            logger.info(f"Created notes folder {self.notes_folder}")
        self._folder_ready = True

    async def has_notes(self, document_identity: str) -> bool:
        """Whether a record exists for the document (False if the backend fails)."""
        try:
            return await self.host.record_exists(
                self.notes_folder, self.record_name(document_identity)
            )
        except RecordStorageError as e:
            record_path = self.record_path(document_identity)
            logger.warning(f"Could not check notes record {record_path}: {e}")
            return False

    async def load(self, document_identity: str) -> DocumentNoteCollection | None:
        """
        Load the note collection of a document.

        Args:
            document_identity: Document identifier

        Returns:
            The stored collection, or None when there is no readable record
        """
        record_path = self.record_path(document_identity)

        try:
            payload = await self.host.read_record(
                self.notes_folder, self.record_name(document_identity)
            )
        except NotFoundError:
            logger.debug(f"No notes record for {document_identity}")
            return None
        except RecordStorageError as e:
            logger.warning(f"Could not read notes record {record_path}: {e}")
            return None

        try:
            collection = DocumentNoteCollection.model_validate(json.loads(payload))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.warning(f"Ignoring corrupt notes record {record_path}: {e}")
            return None

        if collection.document_identity != document_identity:
            logger.debug(
                f"Record {record_path} was saved for {collection.document_identity}"
            )
        return collection

    async def save(self, document_identity: str, notes: Iterable[Note]) -> SaveResult:
        """
        Write the full note collection of a document.

        Args:
            document_identity: Document identifier, stored as documentPath
            notes: Every note of the document

        Returns:
            SaveResult describing success or the failure
        """
        record_path = self.record_path(document_identity)
        collection = DocumentNoteCollection(
            document_identity=document_identity, notes=list(notes)
        )
        payload = json.dumps(collection.to_record(), indent=2, ensure_ascii=False)

        try:
            await self.ensure_folder()
            await self.host.write_record(
                self.notes_folder, self.record_name(document_identity), payload
            )
        except (DocNotesError, OSError) as e:
            logger.error(f"Failed to save notes record {record_path}: {e}")
            return SaveResult(success=False, record_path=record_path, error=str(e))

        logger.debug(f"Saved {len(collection.notes)} notes to {record_path}")
        return SaveResult(success=True, record_path=record_path)
