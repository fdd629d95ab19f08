"""
Note models for per-document annotations.

A Note optionally carries an anchor: the text that was selected when the
note was created plus the start/end positions of that selection. The
anchor is a snapshot and is never re-aligned after document edits.

Persisted field names follow the record format (camelCase); Python code
uses the snake_case attribute names.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Position(BaseModel):
    """A zero-based line/column position inside a document."""

    line: int = Field(..., ge=0, description="Zero-based line number")
    ch: int = Field(..., ge=0, description="Zero-based column within the line")


class Anchor(BaseModel):
    """Snapshot of the selection a note was created from."""

    selected_text: str = Field(..., description="Exact text captured at creation")
    range_start: Position = Field(..., description="Selection start")
    range_end: Position = Field(..., description="Selection end")


class Note(BaseModel):
    """
    A free-form text note attached to one document.

    `created_at` is bumped on every content edit, so it behaves as a
    last-modified timestamp. It is the only display sort key.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Opaque note ID, immutable once assigned")
    content: str = Field(default="", description="Note text, empty is valid")
    created_at: int = Field(..., alias="createdAt", description="Epoch milliseconds")

    # Anchor fields, all three or none
    selected_text: str | None = Field(default=None, alias="selectedText")
    selection_start: Position | None = Field(default=None, alias="selectionStart")
    selection_end: Position | None = Field(default=None, alias="selectionEnd")

    @model_validator(mode="after")
    def check_anchor_complete(self) -> "Note":
        """Reject notes carrying only part of an anchor."""
        fields = (self.selected_text, self.selection_start, self.selection_end)
        present = [value is not None for value in fields]
        if any(present) and not all(present):
            raise ValueError(
                "Partial anchor: selectedText, selectionStart and selectionEnd "
                "must be set together"
            )
        return self

    @classmethod
    def create(
        cls,
        note_id: str,
        created_at: int,
        content: str = "",
        anchor: Anchor | None = None,
    ) -> "Note":
        """Build a note, flattening the optional anchor into its fields."""
        if anchor is None:
            return cls(id=note_id, content=content, created_at=created_at)
        return cls(
            id=note_id,
            content=content,
            created_at=created_at,
            selected_text=anchor.selected_text,
            selection_start=anchor.range_start.model_copy(),
            selection_end=anchor.range_end.model_copy(),
        )

    @property
    def anchor(self) -> Anchor | None:
        """The note's anchor, or None for freestanding notes."""
        if self.selected_text is None or self.selection_start is None or self.selection_end is None:
            return None
        return Anchor(
            selected_text=self.selected_text,
            range_start=self.selection_start,
            range_end=self.selection_end,
        )

    @property
    def has_anchor(self) -> bool:
        return self.anchor is not None

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted record shape, omitting absent anchors."""
        return self.model_dump(by_alias=True, exclude_none=True)


def sort_by_recency(notes: list[Note]) -> list[Note]:
    """
    Return notes ordered by `created_at`, most recent first.

    The sort is stable: notes with equal timestamps keep their relative order.
    """
    return sorted(notes, key=lambda note: note.created_at, reverse=True)


class DocumentNoteCollection(BaseModel):
    """All notes of one document, as persisted in a single record."""

    model_config = ConfigDict(populate_by_name=True)

    document_identity: str = Field(
        ...,
        alias="documentPath",
        description="Canonical document identifier at last save",
    )
    notes: list[Note] = Field(default_factory=list)

    def find(self, note_id: str) -> Note | None:
        """Look up a note by ID."""
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def sorted_notes(self) -> list[Note]:
        """Notes in display order (most recent first)."""
        return sort_by_recency(self.notes)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted record shape."""
        return {
            "documentPath": self.document_identity,
            "notes": [note.to_record() for note in self.notes],
        }
