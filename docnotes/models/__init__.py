"""
Data models for DocNotes.

Core models:
- Position, Anchor: Selection snapshot captured when a note is created
- Note: A single annotation, optionally anchored
- DocumentNoteCollection: All notes of one document (one persisted record)
- ResolvedAnchor, AnchorFailure: Anchor navigation results
- SaveResult: Outcome of a persistence write
"""

from docnotes.models.navigation import AnchorFailure, ResolvedAnchor
from docnotes.models.note import (
    Anchor,
    DocumentNoteCollection,
    Note,
    Position,
    sort_by_recency,
)
from docnotes.models.storage import SaveResult

__all__ = [
    "Position",
    "Anchor",
    "Note",
    "DocumentNoteCollection",
    "sort_by_recency",
    "AnchorFailure",
    "ResolvedAnchor",
    "SaveResult",
]
