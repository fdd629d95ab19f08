"""
Note lifecycle and anchor navigation for the active document.

The controller keeps the notes of exactly one document in memory (the
working set). Every operation names its document explicitly; naming a
different document than the loaded one unloads the old working set and
loads the new one first.

Mutations rewrite the whole record, so they are serialized per document
with an asyncio.Lock. Concurrent writers to the same record would
otherwise lose edits silently.
"""

import asyncio
from collections.abc import Callable

from docnotes.config import NavigationConfig
from docnotes.core.host.base import DocumentHandle, DocumentHost
from docnotes.core.note_store.note_store import NoteStore
from docnotes.models.navigation import AnchorFailure, ResolvedAnchor
from docnotes.models.note import Anchor, DocumentNoteCollection, Note, sort_by_recency
from docnotes.models.storage import SaveResult
from docnotes.services.editor_wait import wait_for_editor
from docnotes.utils.exceptions import AnchorUnavailableError, ValidationError
from docnotes.utils.id_generator import current_millis, generate_note_id
from docnotes.utils.logger import get_logger

logger = get_logger(__name__)

VIEW_TYPE_DOCUMENT_NOTES = "document-notes-view"


class NoteController:
    """
    Orchestrates note operations against a NoteStore and a DocumentHost.

    Lifecycle per document:
    - Unloaded -> Loaded on refresh() (or implicitly on first operation)
    - Loaded across create/edit/delete
    - back to Unloaded when another document becomes active

    Save failures are reported through host notifications. The in-memory
    working set is not rolled back, so repeating an operation re-saves
    the current state.
    """

    def __init__(
        self,
        store: NoteStore,
        host: DocumentHost,
        navigation: NavigationConfig | None = None,
        clock: Callable[[], int] = current_millis,
        id_factory: Callable[[], str] = generate_note_id,
    ):
        """
        Initialize NoteController.

        Args:
            store: Persistence for note collections
            host: Document host for editors, panels and notifications
            navigation: Editor polling settings for anchor navigation
            clock: Returns the current time in epoch milliseconds
            id_factory: Returns a new note ID
        """
        self.store = store
        self.host = host
        self.navigation = navigation or NavigationConfig()
        self.clock = clock
        self.id_factory = id_factory

        self.active_identity: str | None = None
        self.working_set: DocumentNoteCollection | None = None
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def is_loaded(self) -> bool:
        return self.working_set is not None

    @property
    def notes(self) -> list[Note]:
        """Working set in display order (empty when unloaded)."""
        if self.working_set is None:
            return []
        return list(self.working_set.notes)

    def _lock(self, document_identity: str) -> asyncio.Lock:
        lock = self._locks.get(document_identity)
        if lock is None:
            lock = self._locks[document_identity] = asyncio.Lock()
        return lock

    @staticmethod
    def _require_identity(document_identity: str | None) -> str:
        if not document_identity:
            raise ValidationError("Document identity cannot be empty")
        return document_identity

    # ═══════════════════════════════════════════════════════════
    # WORKING SET
    # ═══════════════════════════════════════════════════════════

    async def _load(self, document_identity: str) -> None:
        collection = await self.store.load(document_identity)
        if collection is None:
            collection = DocumentNoteCollection(document_identity=document_identity)
        collection.notes = collection.sorted_notes()

        self.active_identity = document_identity
        self.working_set = collection
        logger.debug(f"Loaded {len(collection.notes)} notes for {document_identity}")

    async def _ensure_loaded(self, document_identity: str) -> DocumentNoteCollection:
        if self.working_set is None or self.active_identity != document_identity:
            await self._load(document_identity)
        return self.working_set

    def unload(self) -> None:
        """Drop the working set (transition to Unloaded)."""
        self.active_identity = None
        self.working_set = None

    async def _persist(
        self, document_identity: str, collection: DocumentNoteCollection
    ) -> SaveResult:
        result = await self.store.save(document_identity, collection.notes)
        if not result.success:
            await self.host.notify(f"Failed to save notes: {result.error}")
        return result

    async def refresh(self, document_identity: str) -> list[Note]:
        """
        Reload the notes of a document from storage.

        A missing or unreadable record yields an empty working set.

        Args:
            document_identity: Document to load

        Returns:
            Notes sorted most recent first
        """
        document_identity = self._require_identity(document_identity)
        async with self._lock(document_identity):
            await self._load(document_identity)
            return self.notes

    async def on_document_changed(self, document_identity: str | None) -> list[Note]:
        """
        Host hook for a newly activated document.

        Args:
            document_identity: New active document, or None when nothing is open

        Returns:
            The new working set
        """
        if not document_identity:
            self.unload()
            return []
        return await self.refresh(document_identity)

    # ═══════════════════════════════════════════════════════════
    # NOTE LIFECYCLE
    # ═══════════════════════════════════════════════════════════

    def _new_note_id(self, collection: DocumentNoteCollection) -> str:
        note_id = self.id_factory()
        while collection.find(note_id) is not None:
            note_id = self.id_factory()
        return note_id

    async def create_note(
        self,
        document_identity: str,
        content: str = "",
        anchor: Anchor | None = None,
    ) -> list[Note]:
        """
        Create a note at the front of the working set and persist it.

        Args:
            document_identity: Owning document
            content: Initial text
            anchor: Selection snapshot, None for a freestanding note

        Returns:
            Updated notes, most recent first
        """
        document_identity = self._require_identity(document_identity)
        async with self._lock(document_identity):
            collection = await self._ensure_loaded(document_identity)
            note = Note.create(
                note_id=self._new_note_id(collection),
                created_at=self.clock(),
                content=content,
                anchor=anchor,
            )
            # Stable sort keeps the new note first among equal timestamps
            collection.notes = sort_by_recency([note, *collection.notes])
            logger.info(f"Created note {note.id} for {document_identity}")
            await self._persist(document_identity, collection)
            return list(collection.notes)

    async def edit_note(self, document_identity: str, note_id: str, content: str) -> list[Note]:
        """
        Replace a note's content and bump its timestamp.

        Unknown IDs are ignored: the note may have been deleted meanwhile.

        Args:
            document_identity: Owning document
            note_id: Note to edit
            content: New text

        Returns:
            Updated notes, most recent first
        """
        document_identity = self._require_identity(document_identity)
        async with self._lock(document_identity):
            collection = await self._ensure_loaded(document_identity)
            note = collection.find(note_id)
            if note is None:
                logger.debug(f"Edit ignored, note {note_id} not found in {document_identity}")
                return list(collection.notes)

            note.content = content
            note.created_at = self.clock()
            collection.notes = sort_by_recency(collection.notes)
            await self._persist(document_identity, collection)
            return list(collection.notes)

    async def delete_note(self, document_identity: str, note_id: str) -> list[Note]:
        """
        Remove a note (if present) and persist the remaining ones.

        Args:
            document_identity: Owning document
            note_id: Note to delete

        Returns:
            Updated notes, most recent first
        """
        document_identity = self._require_identity(document_identity)
        async with self._lock(document_identity):
            collection = await self._ensure_loaded(document_identity)
            remaining = [note for note in collection.notes if note.id != note_id]
            if len(remaining) < len(collection.notes):
                logger.info(f"Deleted note {note_id} from {document_identity}")
            collection.notes = remaining
            await self._persist(document_identity, collection)
            return list(collection.notes)

    async def create_note_from_selection(
        self, document_identity: str | None = None
    ) -> list[Note] | None:
        """
        Create an anchored note from the host's current selection.

        Args:
            document_identity: Document to annotate (default: host's active document).
                Must be the active document.

        Returns:
            Updated notes, or None when there is no active document, no
            selection, or document_identity names another document
        """
        active_identity = await self.host.get_active_document()
        if not active_identity:
            return None
        if document_identity and document_identity != active_identity:
            logger.debug(
                f"Selection belongs to {active_identity}, not {document_identity}"
            )
            return None
        document_identity = active_identity

        anchor = await self.host.get_active_selection()
        if anchor is None or not anchor.selected_text:
            return None

        notes = await self.create_note(document_identity, anchor=anchor)
        await self.host.notify("Note created from selection")
        return notes

    # ═══════════════════════════════════════════════════════════
    # ANCHOR NAVIGATION
    # ═══════════════════════════════════════════════════════════

    async def _resolve(
        self, document_identity: str, note_id: str
    ) -> tuple[ResolvedAnchor, DocumentHandle]:
        document_identity = self._require_identity(document_identity)
        async with self._lock(document_identity):
            collection = await self._ensure_loaded(document_identity)
            note = collection.find(note_id)
            anchor = note.anchor if note is not None else None
            # Navigation targets the path the record was saved for
            target = collection.document_identity or document_identity

        if anchor is None:
            raise AnchorUnavailableError(
                AnchorFailure.MISSING_SELECTION,
                context={"document": document_identity, "note_id": note_id},
            )

        handle = await self.host.resolve_document(target)
        if handle is None:
            raise AnchorUnavailableError(
                AnchorFailure.DOCUMENT_NOT_FOUND,
                f"{AnchorFailure.DOCUMENT_NOT_FOUND.message}: {target}",
                context={"document": target, "note_id": note_id},
            )

        resolved = ResolvedAnchor(
            document_identity=handle.identity,
            range_start=anchor.range_start,
            range_end=anchor.range_end,
        )
        return resolved, handle

    @staticmethod
    def _check_in_range(resolved: ResolvedAnchor, line_count: int) -> None:
        # Best-effort staleness check; columns are never re-aligned
        if resolved.range_start.line >= line_count:
            raise AnchorUnavailableError(
                AnchorFailure.OUT_OF_RANGE,
                context={
                    "document": resolved.document_identity,
                    "line": resolved.range_start.line,
                    "line_count": line_count,
                },
            )

    async def resolve_anchor(
        self,
        document_identity: str,
        note_id: str,
        line_count: int | None = None,
    ) -> ResolvedAnchor:
        """
        Resolve a note's anchor to its document and stored range.

        Args:
            document_identity: Document whose notes contain the note
            note_id: Note to resolve
            line_count: Live line count of the document, if known

        Returns:
            The resolved anchor

        Raises:
            AnchorUnavailableError: If the note has no anchor, its document
                cannot be located, or the anchor starts past line_count
        """
        resolved, _ = await self._resolve(document_identity, note_id)
        if line_count is not None:
            self._check_in_range(resolved, line_count)
        return resolved

    async def navigate_to_anchor(
        self,
        document_identity: str,
        note_id: str,
        timeout: float | None = None,
    ) -> ResolvedAnchor | None:
        """
        Open the anchor's document and select the anchored range.

        Failures are reported as host notifications, not raised.

        Args:
            document_identity: Document whose notes contain the note
            note_id: Note to navigate to
            timeout: Optional overall deadline for the editor to appear

        Returns:
            The resolved anchor, or None if navigation failed
        """
        try:
            resolved, handle = await self._resolve(document_identity, note_id)
            await self.host.open_document(handle)
            editor = await wait_for_editor(
                self.host,
                max_attempts=self.navigation.max_attempts,
                poll_interval=self.navigation.poll_interval,
                timeout=timeout,
                document_identity=handle.identity,
            )
            self._check_in_range(resolved, editor.line_count())

            editor.set_cursor(resolved.range_start)
            editor.scroll_into_view(resolved.range_start, resolved.range_end, center=True)
            editor.set_selection(resolved.range_start, resolved.range_end)
        except AnchorUnavailableError as e:
            logger.info(f"Navigation to note {note_id} failed: {e.reason.value}")
            await self.host.notify(e.message)
            return None

        await self.host.notify("Navigated to selection")
        return resolved

    # ═══════════════════════════════════════════════════════════
    # PANEL
    # ═══════════════════════════════════════════════════════════

    async def show_panel(self) -> str:
        """
        Reveal the notes panel, opening one if none exists.

        Returns:
            Panel ID
        """
        panels = await self.host.list_panels(VIEW_TYPE_DOCUMENT_NOTES)
        panel_id = panels[0] if panels else await self.host.open_panel(VIEW_TYPE_DOCUMENT_NOTES)
        await self.host.reveal_panel(panel_id)
        return panel_id
