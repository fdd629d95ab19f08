"""Note persistence for DocNotes."""

from docnotes.core.note_store.note_store import NoteStore

__all__ = ["NoteStore"]
