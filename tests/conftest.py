"""Shared fixtures for DocNotes tests.

InMemoryDocumentHost is a DocumentHost test double: documents are plain
strings, records live in a dict, and the editor can be made to appear
only after a number of polls to simulate a slow host.
"""

from collections.abc import AsyncGenerator

import pytest

from docnotes.config import NavigationConfig
from docnotes.core.host.base import DocumentHandle, DocumentHost, EditorHandle
from docnotes.core.note_store import NoteStore
from docnotes.models import Anchor, Position
from docnotes.services import NoteController
from docnotes.utils.exceptions import NotFoundError, RecordStorageError


class FakeEditor(EditorHandle):
    """Editor double recording cursor, scroll and selection calls."""

    def __init__(self, document_identity: str, text: str):
        self.document_identity = document_identity
        self.text = text
        self.cursor: Position | None = None
        self.scrolled_to: tuple[Position, Position] | None = None
        self.selection: tuple[Position, Position] | None = None

    def line_count(self) -> int:
        return len(self.text.split("\n"))

    def set_cursor(self, position: Position) -> None:
        self.cursor = position

    def scroll_into_view(self, start: Position, end: Position, center: bool = True) -> None:
        self.scrolled_to = (start, end)

    def set_selection(self, start: Position, end: Position) -> None:
        self.selection = (start, end)


class InMemoryDocumentHost(DocumentHost):
    """DocumentHost double backed by dictionaries."""

    def __init__(self):
        self.documents: dict[str, str] = {}
        self.folders: set[str] = set()
        self.records: dict[tuple[str, str], str] = {}
        self.notifications: list[str] = []
        self.panels: list[str] = []
        self.revealed: str | None = None

        self.active_document: str | None = None
        self.selection: Anchor | None = None
        self.editor: FakeEditor | None = None
        self.opened: list[str] = []

        # Simulation knobs
        self.editor_delay_polls = 0
        self.editor_never_ready = False
        self.fail_writes = False
        self.write_count = 0
        self.polls = 0
        self._pending_editor: FakeEditor | None = None

    async def get_active_document(self) -> str | None:
        return self.active_document

    async def get_active_selection(self) -> Anchor | None:
        return self.selection

    async def folder_exists(self, folder: str) -> bool:
        return folder in self.folders

    async def create_folder(self, folder: str) -> None:
        self.folders.add(folder)

    async def record_exists(self, folder: str, name: str) -> bool:
        return (folder, name) in self.records

    async def read_record(self, folder: str, name: str) -> str:
        try:
            return self.records[(folder, name)]
        except KeyError as e:
            raise NotFoundError(f"Record not found: {folder}/{name}") from e

    async def write_record(self, folder: str, name: str, payload: str) -> None:
        if self.fail_writes:
            raise RecordStorageError("disk full")
        self.write_count += 1
        self.records[(folder, name)] = payload

    async def resolve_document(self, identity: str) -> DocumentHandle | None:
        if identity not in self.documents:
            return None
        return DocumentHandle(identity=identity)

    async def open_document(self, handle: DocumentHandle) -> None:
        self.opened.append(handle.identity)
        self.active_document = handle.identity
        self.editor = None
        self.polls = 0
        self._pending_editor = FakeEditor(handle.identity, self.documents[handle.identity])

    async def get_active_editor(self) -> EditorHandle | None:
        self.polls += 1
        if self.editor is None and self._pending_editor is not None:
            if not self.editor_never_ready and self.polls > self.editor_delay_polls:
                self.editor = self._pending_editor
        return self.editor

    async def list_panels(self, view_type: str) -> list[str]:
        return list(self.panels)

    async def open_panel(self, view_type: str) -> str:
        panel_id = f"{view_type}-{len(self.panels) + 1}"
        self.panels.append(panel_id)
        return panel_id

    async def reveal_panel(self, panel_id: str) -> None:
        self.revealed = panel_id

    async def notify(self, message: str) -> None:
        self.notifications.append(message)


class FakeClock:
    """Deterministic millisecond clock, advancing by `step` per call."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


@pytest.fixture
def host() -> InMemoryDocumentHost:
    return InMemoryDocumentHost()


@pytest.fixture
def store(host) -> NoteStore:
    return NoteStore(host=host, notes_folder="document-notes")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def controller(store, host, clock) -> NoteController:
    return NoteController(
        store=store,
        host=host,
        navigation=NavigationConfig(max_attempts=10, poll_interval=0.0),
        clock=clock,
    )


@pytest.fixture
def hello_anchor() -> Anchor:
    return Anchor(
        selected_text="Hello",
        range_start=Position(line=0, ch=0),
        range_end=Position(line=0, ch=5),
    )


@pytest.fixture
async def sqlite_records(tmp_path) -> AsyncGenerator:
    """SQLite record storage in a temporary database file."""
    from docnotes.core.records import SQLiteRecordStorage

    storage = SQLiteRecordStorage(db_path=str(tmp_path / "records.db"))
    await storage.initialize()
    yield storage
    await storage.close()


@pytest.fixture
def corrupt_db_path(tmp_path) -> str:
    """Path to a file that exists but is not an SQLite database."""
    path = tmp_path / "corrupt.db"
    path.write_bytes(b"this is not an sqlite database\n" * 64)
    return str(path)
