"""
Models for anchor resolution and navigation results.
"""

from enum import Enum

from pydantic import BaseModel, Field

from docnotes.models.note import Position


class AnchorFailure(str, Enum):
    """Why a note's anchor could not be resolved to a live position."""

    MISSING_SELECTION = "missing_selection"
    DOCUMENT_NOT_FOUND = "document_not_found"
    EDITOR_UNAVAILABLE = "editor_unavailable"
    OUT_OF_RANGE = "out_of_range"

    @property
    def message(self) -> str:
        """User-facing notification text for this failure."""
        return _FAILURE_MESSAGES[self]


_FAILURE_MESSAGES = {
    AnchorFailure.MISSING_SELECTION: "Selection information is incomplete",
    AnchorFailure.DOCUMENT_NOT_FOUND: "Could not find the source document",
    AnchorFailure.EDITOR_UNAVAILABLE: "Could not access the document editor",
    AnchorFailure.OUT_OF_RANGE: "The selection position is outside the document",
}


class ResolvedAnchor(BaseModel):
    """A note anchor resolved against its owning document."""

    document_identity: str = Field(..., description="Document the anchor belongs to")
    range_start: Position
    range_end: Position
