"""Utility modules for DocNotes."""

from docnotes.utils.exceptions import (
    AnchorUnavailableError,
    ConfigurationError,
    DocNotesError,
    EditorTimeoutError,
    NotFoundError,
    RecordStorageError,
    StoreError,
    ValidationError,
)
from docnotes.utils.id_generator import current_millis, generate_note_id
from docnotes.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # IDs and time
    "generate_note_id",
    "current_millis",
    # Exceptions
    "DocNotesError",
    "StoreError",
    "RecordStorageError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "AnchorUnavailableError",
    "EditorTimeoutError",
]
