"""
Tests for the headless local document host.
"""

import pytest

from docnotes.config import NavigationConfig
from docnotes.core.host import LocalDocumentHost
from docnotes.core.note_store import NoteStore
from docnotes.core.records import FileRecordStorage
from docnotes.models import AnchorFailure, Position
from docnotes.services import NoteController
from docnotes.utils.exceptions import AnchorUnavailableError, ValidationError


@pytest.fixture
def documents(tmp_path):
    root = tmp_path / "vault"
    (root / "notes").mkdir(parents=True)
    (root / "doc.md").write_text("Hello world\nsecond line\n", encoding="utf-8")
    (root / "notes" / "inner.md").write_text("inner", encoding="utf-8")
    (tmp_path / "outside.md").write_text("secret", encoding="utf-8")
    return root


@pytest.fixture
def local_host(documents, tmp_path):
    records = FileRecordStorage(root=str(tmp_path / "records"))
    return LocalDocumentHost(documents_root=documents, records=records, max_notifications=3)


@pytest.mark.unit
@pytest.mark.asyncio
class TestDocuments:
    """Tests for document resolution and editors."""

    async def test_resolves_nested_document(self, local_host, documents):
        handle = await local_host.resolve_document("notes/inner.md")

        assert handle.identity == "notes/inner.md"
        assert handle.location == str((documents / "notes" / "inner.md").resolve())

    @pytest.mark.parametrize("identity", ["missing.md", "../outside.md", "notes"])
    async def test_unresolvable_documents(self, local_host, identity):
        assert await local_host.resolve_document(identity) is None

    async def test_no_editor_before_open(self, local_host):
        assert await local_host.get_active_editor() is None
        assert await local_host.get_active_document() is None

    async def test_open_activates_editor(self, local_host):
        handle = await local_host.resolve_document("doc.md")
        await local_host.open_document(handle)

        editor = await local_host.get_active_editor()
        assert editor.document_identity == "doc.md"
        # Trailing newline leaves an empty last line
        assert editor.line_count() == 3
        assert await local_host.get_active_document() == "doc.md"

    async def test_line_count_follows_file_changes(self, local_host, documents):
        await local_host.open_document(await local_host.resolve_document("doc.md"))
        (documents / "doc.md").write_text("one", encoding="utf-8")

        editor = await local_host.get_active_editor()
        assert editor.line_count() == 1


@pytest.mark.unit
@pytest.mark.asyncio
class TestSelection:
    """Tests for the in-memory selection."""

    async def test_select_requires_editor(self, local_host):
        with pytest.raises(ValidationError):
            await local_host.select(Position(line=0, ch=0), Position(line=0, ch=5))

    async def test_selection_snapshot(self, local_host):
        await local_host.open_document(await local_host.resolve_document("doc.md"))
        await local_host.select(Position(line=0, ch=0), Position(line=0, ch=5))

        anchor = await local_host.get_active_selection()

        assert anchor.selected_text == "Hello"
        assert anchor.range_start == Position(line=0, ch=0)
        assert anchor.range_end == Position(line=0, ch=5)

    async def test_reversed_selection_is_normalized(self, local_host):
        await local_host.open_document(await local_host.resolve_document("doc.md"))
        await local_host.select(Position(line=1, ch=6), Position(line=0, ch=6))

        anchor = await local_host.get_active_selection()

        assert anchor.selected_text == "world\nsecond"
        assert anchor.range_start == Position(line=0, ch=6)

    async def test_empty_selection_is_none(self, local_host):
        await local_host.open_document(await local_host.resolve_document("doc.md"))
        await local_host.select(Position(line=0, ch=2), Position(line=0, ch=2))

        assert await local_host.get_active_selection() is None

    async def test_cursor_move_clears_selection(self, local_host):
        await local_host.open_document(await local_host.resolve_document("doc.md"))
        await local_host.select(Position(line=0, ch=0), Position(line=0, ch=5))

        editor = await local_host.get_active_editor()
        editor.set_cursor(Position(line=1, ch=0))

        assert await local_host.get_active_selection() is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestPanelsAndNotifications:
    """Tests for panels and the notification buffer."""

    async def test_panels_per_view_type(self, local_host):
        first = await local_host.open_panel("notes")
        await local_host.open_panel("other")

        assert await local_host.list_panels("notes") == [first]
        assert await local_host.list_panels("unknown") == []

    async def test_notifications_are_bounded(self, local_host):
        for i in range(5):
            await local_host.notify(f"message {i}")

        assert list(local_host.notifications) == ["message 2", "message 3", "message 4"]


@pytest.mark.integration
@pytest.mark.asyncio
class TestNavigationOnLocalHost:
    """End-to-end navigation against real files."""

    async def test_create_from_selection_then_navigate(self, local_host):
        store = NoteStore(host=local_host)
        controller = NoteController(
            store=store,
            host=local_host,
            navigation=NavigationConfig(max_attempts=3, poll_interval=0.0),
        )
        await local_host.open_document(await local_host.resolve_document("doc.md"))
        await local_host.select(Position(line=1, ch=0), Position(line=1, ch=6))

        notes = await controller.create_note_from_selection()
        editor = await local_host.get_active_editor()
        editor.set_cursor(Position(line=0, ch=0))

        resolved = await controller.navigate_to_anchor("doc.md", notes[0].id)

        assert resolved.range_start == Position(line=1, ch=0)
        assert editor.selection == (Position(line=1, ch=0), Position(line=1, ch=6))
        assert editor.visible_range == (Position(line=1, ch=0), Position(line=1, ch=6))
        assert local_host.notifications[-1] == "Navigated to selection"
        assert await store.has_notes("doc.md")

    async def test_undecodable_document_notifies(self, local_host, documents, hello_anchor):
        (documents / "binary.txt").write_bytes(b"Hello \xff\xfe world\n")
        controller = NoteController(
            store=NoteStore(host=local_host),
            host=local_host,
            navigation=NavigationConfig(max_attempts=3, poll_interval=0.0),
        )
        note = (await controller.create_note("binary.txt", anchor=hello_anchor))[0]

        resolved = await controller.navigate_to_anchor("binary.txt", note.id)

        assert resolved is None
        assert local_host.notifications[-1] == (
            f"{AnchorFailure.DOCUMENT_NOT_FOUND.message}: binary.txt"
        )


@pytest.mark.unit
@pytest.mark.asyncio
class TestUnreadableDocuments:
    """Editors over files that can no longer be read."""

    async def test_deleted_after_open(self, local_host, documents):
        await local_host.open_document(await local_host.resolve_document("doc.md"))
        (documents / "doc.md").unlink()

        editor = await local_host.get_active_editor()
        with pytest.raises(AnchorUnavailableError) as exc_info:
            editor.line_count()

        assert exc_info.value.reason is AnchorFailure.DOCUMENT_NOT_FOUND

    async def test_selection_in_undecodable_document(self, local_host, documents):
        (documents / "binary.txt").write_bytes(b"\xff\xfe\xfd")
        await local_host.open_document(await local_host.resolve_document("binary.txt"))
        await local_host.select(Position(line=0, ch=0), Position(line=0, ch=2))

        assert await local_host.get_active_selection() is None
