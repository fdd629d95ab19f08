"""
Headless document host over a directory of text files.

Document identities are POSIX paths relative to the documents root.
Editors keep cursor and selection in memory; notifications are logged
and retained in a bounded buffer so API clients can fetch them.
"""

from collections import deque
from pathlib import Path

from docnotes.core.host.base import DocumentHandle, DocumentHost, EditorHandle
from docnotes.core.records.base import RecordStorage
from docnotes.models.navigation import AnchorFailure
from docnotes.models.note import Anchor, Position
from docnotes.utils.exceptions import AnchorUnavailableError, ValidationError
from docnotes.utils.logger import get_logger

logger = get_logger(__name__)


class LocalEditor(EditorHandle):
    """Editor state for one file: cursor, selection and scroll target."""

    def __init__(self, document_identity: str, path: Path):
        self.document_identity = document_identity
        self.path = path
        self.cursor = Position(line=0, ch=0)
        self.selection: tuple[Position, Position] | None = None
        self.visible_range: tuple[Position, Position] | None = None

    def _lines(self) -> list[str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            # Deleted, unreadable or not UTF-8
            raise AnchorUnavailableError(
                AnchorFailure.DOCUMENT_NOT_FOUND,
                f"{AnchorFailure.DOCUMENT_NOT_FOUND.message}: {self.document_identity}",
                context={"document": self.document_identity, "error": str(e)},
            ) from e
        return text.split("\n")

    def line_count(self) -> int:
        # An empty document still has one line
        return len(self._lines())

    def set_cursor(self, position: Position) -> None:
        self.cursor = position
        self.selection = None

    def scroll_into_view(self, start: Position, end: Position, center: bool = True) -> None:
        self.visible_range = (start, end)

    def set_selection(self, start: Position, end: Position) -> None:
        self.selection = (start, end)
        self.cursor = end

    def get_range(self, start: Position, end: Position) -> str:
        """Text between two positions, columns clamped to line length."""
        lines = self._lines()
        if start.line >= len(lines):
            return ""
        end_line = min(end.line, len(lines) - 1)
        if start.line == end_line:
            return lines[start.line][start.ch : end.ch]
        parts = [lines[start.line][start.ch :]]
        parts.extend(lines[start.line + 1 : end_line])
        parts.append(lines[end_line][: end.ch])
        return "\n".join(parts)


class LocalDocumentHost(DocumentHost):
    """DocumentHost implementation for a local directory of documents."""

    def __init__(
        self,
        documents_root: str | Path,
        records: RecordStorage,
        max_notifications: int = 100,
    ):
        """
        Initialize the local host.

        Args:
            documents_root: Directory containing the documents
            records: Backend used for note records
            max_notifications: Number of notifications kept for retrieval
        """
        self.documents_root = Path(documents_root).resolve()
        self.records = records
        self.notifications: deque[str] = deque(maxlen=max_notifications)

        self._active_identity: str | None = None
        self._editors: dict[str, LocalEditor] = {}
        self._panels: dict[str, list[str]] = {}
        self.revealed_panel: str | None = None

    def _document_path(self, identity: str) -> Path | None:
        path = (self.documents_root / identity).resolve()
        if not path.is_relative_to(self.documents_root):
            return None
        return path

    async def get_active_document(self) -> str | None:
        return self._active_identity

    async def get_active_selection(self) -> Anchor | None:
        editor = await self.get_active_editor()
        if editor is None or editor.selection is None:
            return None
        start, end = editor.selection
        try:
            text = editor.get_range(start, end)
        except AnchorUnavailableError as e:
            logger.warning(f"Cannot read selection: {e.message}")
            return None
        if not text:
            return None
        return Anchor(selected_text=text, range_start=start, range_end=end)

    async def select(self, start: Position, end: Position) -> None:
        """
        Select a range in the active editor, as a user would.

        Raises:
            ValidationError: If no document is open
        """
        editor = await self.get_active_editor()
        if editor is None:
            raise ValidationError("No active editor to select in")
        if (end.line, end.ch) < (start.line, start.ch):
            start, end = end, start
        editor.set_selection(start, end)

    # Record storage

    async def folder_exists(self, folder: str) -> bool:
        return await self.records.namespace_exists(folder)

    async def create_folder(self, folder: str) -> None:
        await self.records.create_namespace(folder)

    async def record_exists(self, folder: str, name: str) -> bool:
        return await self.records.exists(folder, name)

    async def read_record(self, folder: str, name: str) -> str:
        return await self.records.read(folder, name)

    async def write_record(self, folder: str, name: str, payload: str) -> None:
        await self.records.write(folder, name, payload)

    # Documents & editors

    async def resolve_document(self, identity: str) -> DocumentHandle | None:
        path = self._document_path(identity)
        if path is None or not path.is_file():
            logger.debug(f"Document not found: {identity}")
            return None
        return DocumentHandle(identity=identity, location=str(path))

    async def open_document(self, handle: DocumentHandle) -> None:
        if handle.identity not in self._editors:
            path = Path(handle.location) if handle.location else self._document_path(handle.identity)
            self._editors[handle.identity] = LocalEditor(handle.identity, path)
        self._active_identity = handle.identity
        logger.debug(f"Opened document {handle.identity}")

    async def get_active_editor(self) -> LocalEditor | None:
        if self._active_identity is None:
            return None
        return self._editors.get(self._active_identity)

    # Panels & notifications

    async def list_panels(self, view_type: str) -> list[str]:
        return list(self._panels.get(view_type, []))

    async def open_panel(self, view_type: str) -> str:
        panels = self._panels.setdefault(view_type, [])
        panel_id = f"{view_type}-{len(panels) + 1}"
        panels.append(panel_id)
        return panel_id

    async def reveal_panel(self, panel_id: str) -> None:
        self.revealed_panel = panel_id

    async def notify(self, message: str) -> None:
        logger.info(f"Notice: {message}")
        self.notifications.append(message)
