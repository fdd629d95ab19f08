"""
Services for DocNotes.

- NoteController: Note lifecycle and anchor navigation for the active document
- wait_for_editor: Bounded polling for an editor to become available
"""

from docnotes.services.editor_wait import wait_for_editor
from docnotes.services.note_controller import VIEW_TYPE_DOCUMENT_NOTES, NoteController

__all__ = [
    "NoteController",
    "VIEW_TYPE_DOCUMENT_NOTES",
    "wait_for_editor",
]
