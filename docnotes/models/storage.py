"""
Result models for note persistence.
"""

from pydantic import BaseModel, Field


class SaveResult(BaseModel):
    """Outcome of writing a document's note record."""

    success: bool
    record_path: str
    error: str | None = Field(default=None, description="Failure description")

    def __bool__(self) -> bool:
        return self.success
