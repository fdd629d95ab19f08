"""
DocNotes FastAPI Application

A REST API server exposing the document notes command surface:
show the panel, open documents, select text, and create, edit, delete
and navigate notes. Documents are served by a LocalDocumentHost.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from docnotes.config import Config
from docnotes.core.host import LocalDocumentHost
from docnotes.core.note_store import NoteStore
from docnotes.core.records import RecordStorage, RecordStorageFactory
from docnotes.models import Anchor, Note, Position, ResolvedAnchor
from docnotes.services import NoteController
from docnotes.utils.exceptions import AnchorUnavailableError, DocNotesError, ValidationError
from docnotes.utils.logger import get_logger, setup_logging

# Global instances
controller: NoteController | None = None
host: LocalDocumentHost | None = None
records: RecordStorage | None = None
logger = get_logger(__name__)


# Pydantic models for API
class OpenDocumentRequest(BaseModel):
    """Request model for activating a document."""

    document: str = Field(..., description="Document identity (path relative to the root)")


class SelectRequest(BaseModel):
    """Request model for selecting text in the active document."""

    start: Position
    end: Position


class CreateNoteRequest(BaseModel):
    """Request model for creating a note."""

    document: str
    content: str = ""
    anchor: Anchor | None = None


class CreateFromSelectionRequest(BaseModel):
    """Request model for creating a note from the current selection."""

    document: str | None = None


class EditNoteRequest(BaseModel):
    """Request model for editing a note."""

    document: str
    content: str


class ResolveAnchorRequest(BaseModel):
    """Request model for resolving an anchor."""

    document: str
    line_count: int | None = Field(default=None, ge=0)


class NavigateRequest(BaseModel):
    """Request model for navigating to an anchor."""

    document: str
    timeout: float | None = Field(default=None, gt=0)


class NotesResponse(BaseModel):
    """Working set of a document, most recent first."""

    document: str
    notes: list[dict[str, Any]]


class NavigateResponse(BaseModel):
    """Navigation outcome."""

    navigated: bool
    anchor: ResolvedAnchor | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    controller_initialized: bool
    storage_backend: str
    active_document: str | None


def _notes_response(document: str, notes: list[Note]) -> NotesResponse:
    return NotesResponse(document=document, notes=[note.to_record() for note in notes])


def _require_controller() -> NoteController:
    if not controller:
        raise HTTPException(status_code=503, detail="Controller not initialized")
    return controller


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global controller, host, records

    config = Config.from_env()

    setup_logging(config.logging)

    logger.info("Starting DocNotes server")
    logger.info(
        f"Configuration: storage={config.storage.backend}, "
        f"notes_folder={config.storage.notes_folder}, "
        f"documents_root={config.host.documents_root}"
    )

    records = RecordStorageFactory.create(config.storage)
    await records.initialize()

    host = LocalDocumentHost(
        documents_root=config.host.documents_root,
        records=records,
        max_notifications=config.host.max_notifications,
    )
    store = NoteStore(host=host, notes_folder=config.storage.notes_folder)
    await store.ensure_folder()

    controller = NoteController(store=store, host=host, navigation=config.navigation)
    app.state.config = config
    logger.info("DocNotes controller initialized")

    yield

    logger.info("Shutting down DocNotes server")
    await records.close()
    controller = None
    host = None
    records = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="DocNotes API",
    description="Per-document notes anchored to text selections",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if controller else "initializing",
        controller_initialized=controller is not None,
        storage_backend=app.state.config.storage.backend if controller else "unknown",
        active_document=controller.active_identity if controller else None,
    )


# Document endpoints
@app.post("/documents/open", response_model=NotesResponse)
async def open_document(request: OpenDocumentRequest):
    """
    Activate a document in the host and load its notes.
    """
    ctrl = _require_controller()
    handle = await host.resolve_document(request.document)
    if handle is None:
        raise HTTPException(status_code=404, detail=f"Document not found: {request.document}")

    await host.open_document(handle)
    notes = await ctrl.on_document_changed(handle.identity)
    return _notes_response(handle.identity, notes)


@app.post("/documents/selection")
async def select_text(request: SelectRequest):
    """
    Select a range in the active document, as a user would in an editor.
    """
    _require_controller()
    try:
        await host.select(request.start, request.end)
    except ValidationError as e:
        raise HTTPException(status_code=409, detail=e.message) from e

    selection = await host.get_active_selection()
    return {"selection": selection.model_dump() if selection else None}


# Note endpoints
@app.get("/notes", response_model=NotesResponse)
async def list_notes(document: str = Query(..., description="Document identity")):
    """
    Load the notes of a document, most recent first.
    """
    ctrl = _require_controller()
    try:
        notes = await ctrl.refresh(document)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    return _notes_response(document, notes)


@app.post("/notes", response_model=NotesResponse)
async def create_note(request: CreateNoteRequest):
    """
    Create a note, optionally anchored to a selection snapshot.
    """
    ctrl = _require_controller()
    try:
        notes = await ctrl.create_note(
            request.document, content=request.content, anchor=request.anchor
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    except DocNotesError as e:
        logger.error(f"Error creating note: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
    return _notes_response(request.document, notes)


@app.post("/notes/from-selection", response_model=NotesResponse)
async def create_note_from_selection(request: CreateFromSelectionRequest):
    """
    Create an anchored note from the host's current selection.

    Only available while a non-empty selection is active, and only for
    the active document.
    """
    ctrl = _require_controller()
    active = await host.get_active_document()
    if active and request.document and request.document != active:
        raise HTTPException(
            status_code=409, detail=f"Selection belongs to another document: {active}"
        )

    notes = await ctrl.create_note_from_selection(active)
    if notes is None:
        raise HTTPException(status_code=409, detail="No active selection")
    return _notes_response(active, notes)


@app.put("/notes/{note_id}", response_model=NotesResponse)
async def edit_note(note_id: str, request: EditNoteRequest):
    """
    Replace a note's content. Unknown note IDs are ignored.
    """
    ctrl = _require_controller()
    try:
        notes = await ctrl.edit_note(request.document, note_id, request.content)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    return _notes_response(request.document, notes)


@app.delete("/notes/{note_id}", response_model=NotesResponse)
async def delete_note(note_id: str, document: str = Query(..., description="Document identity")):
    """
    Delete a note. Deleting an unknown note is not an error.
    """
    ctrl = _require_controller()
    try:
        notes = await ctrl.delete_note(document, note_id)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    return _notes_response(document, notes)


@app.post("/notes/{note_id}/resolve", response_model=ResolvedAnchor)
async def resolve_anchor(note_id: str, request: ResolveAnchorRequest):
    """
    Resolve a note's anchor without opening the document.
    """
    ctrl = _require_controller()
    try:
        return await ctrl.resolve_anchor(request.document, note_id, line_count=request.line_count)
    except AnchorUnavailableError as e:
        raise HTTPException(
            status_code=409, detail={"reason": e.reason.value, "message": e.message}
        ) from e
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e


@app.post("/notes/{note_id}/navigate", response_model=NavigateResponse)
async def navigate_to_anchor(note_id: str, request: NavigateRequest):
    """
    Open the anchor's document and select the anchored range.
    """
    ctrl = _require_controller()
    try:
        resolved = await ctrl.navigate_to_anchor(request.document, note_id, timeout=request.timeout)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e

    message = host.notifications[-1] if host.notifications else None
    return NavigateResponse(navigated=resolved is not None, anchor=resolved, message=message)


# Panel & notification endpoints
@app.post("/panel")
async def show_panel():
    """Reveal the notes panel, opening it if needed."""
    ctrl = _require_controller()
    return {"panel_id": await ctrl.show_panel()}


@app.get("/notifications")
async def list_notifications():
    """Recent transient notifications, oldest first."""
    _require_controller()
    return {"notifications": list(host.notifications)}
