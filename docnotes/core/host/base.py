"""
Capability interface for the application hosting the documents.

The note controller never touches host objects directly. Everything it
needs (active document, selection, record I/O, editors, panels,
notifications) goes through DocumentHost, so a test double can simulate
document content, line counts and delayed editor availability.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from docnotes.models.note import Anchor, Position


class DocumentHandle(BaseModel):
    """A live, openable document resolved from an identity."""

    identity: str = Field(..., description="Canonical document identifier")
    location: str | None = Field(default=None, description="Host-specific location")


class EditorHandle(ABC):
    """An open editor view on one document."""

    document_identity: str

    @abstractmethod
    def line_count(self) -> int:
        """
        Current number of lines in the document.

        Raises:
            AnchorUnavailableError: If the document can no longer be read
        """
        pass

    @abstractmethod
    def set_cursor(self, position: Position) -> None:
        """Move the cursor."""
        pass

    @abstractmethod
    def scroll_into_view(self, start: Position, end: Position, center: bool = True) -> None:
        """Scroll so the given range is visible."""
        pass

    @abstractmethod
    def set_selection(self, start: Position, end: Position) -> None:
        """Select a range."""
        pass


class DocumentHost(ABC):
    """Abstract base class for document host integrations."""

    # ═══════════════════════════════════════════════════════════
    # ACTIVE DOCUMENT
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def get_active_document(self) -> str | None:
        """
        Identity of the document currently active in the host.

        Returns:
            Document identity or None when no document is active
        """
        pass

    @abstractmethod
    async def get_active_selection(self) -> Anchor | None:
        """
        The non-empty selection in the active editor, if any.

        Returns:
            Anchor snapshot of the selection or None
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # RECORD STORAGE
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def folder_exists(self, folder: str) -> bool:
        """Check whether a record folder exists."""
        pass

    @abstractmethod
    async def create_folder(self, folder: str) -> None:
        """Create a record folder."""
        pass

    @abstractmethod
    async def record_exists(self, folder: str, name: str) -> bool:
        """Check whether a record exists."""
        pass

    @abstractmethod
    async def read_record(self, folder: str, name: str) -> str:
        """
        Read a record.

        Raises:
            NotFoundError: If the record does not exist
        """
        pass

    @abstractmethod
    async def write_record(self, folder: str, name: str, payload: str) -> None:
        """
        Replace a record atomically.

        Raises:
            RecordStorageError: If the write fails
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # DOCUMENTS & EDITORS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def resolve_document(self, identity: str) -> DocumentHandle | None:
        """
        Resolve an identity to an openable document.

        Returns:
            Handle or None if the document cannot be located
        """
        pass

    @abstractmethod
    async def open_document(self, handle: DocumentHandle) -> None:
        """Open (and activate) a document. The editor may become available later."""
        pass

    @abstractmethod
    async def get_active_editor(self) -> EditorHandle | None:
        """
        The editor of the active document.

        Returns:
            Editor handle or None while no editor is ready
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # PANELS & NOTIFICATIONS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def list_panels(self, view_type: str) -> list[str]:
        """IDs of open panels of the given view type."""
        pass

    @abstractmethod
    async def open_panel(self, view_type: str) -> str:
        """Open a new panel and return its ID."""
        pass

    @abstractmethod
    async def reveal_panel(self, panel_id: str) -> None:
        """Bring a panel to the front."""
        pass

    @abstractmethod
    async def notify(self, message: str) -> None:
        """Show a transient, non-modal notification."""
        pass
