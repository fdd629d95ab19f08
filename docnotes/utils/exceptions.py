"""
Custom exception hierarchy for DocNotes.

All exceptions inherit from DocNotesError so callers at the edges
(HTTP handlers, host command callbacks) can catch a single type.
"""

from docnotes.models.navigation import AnchorFailure


class DocNotesError(Exception):
    """
    Base exception for all DocNotes errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize DocNotes error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class StoreError(DocNotesError):
    """
    Base exception for store operations.
    Used for errors related to note persistence.
    """

    pass


class RecordStorageError(StoreError):
    """
    Record storage backend errors.
    Raised when reading or writing a record fails at the backend level.
    """

    pass


class ValidationError(DocNotesError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class NotFoundError(DocNotesError):
    """
    Resource not found errors.
    Raised when a requested record or document doesn't exist.
    """

    pass


class ConfigurationError(DocNotesError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class AnchorUnavailableError(DocNotesError):
    """
    Anchor navigation errors.
    Raised when a note's selection cannot be resolved to a live position.
    """

    def __init__(
        self,
        reason: AnchorFailure,
        message: str | None = None,
        context: dict | None = None,
    ):
        super().__init__(message or reason.message, context)
        self.reason = reason


class EditorTimeoutError(AnchorUnavailableError):
    """
    Raised when no editor became available within the polling bound.
    """

    def __init__(self, attempts: int, context: dict | None = None):
        super().__init__(
            AnchorFailure.EDITOR_UNAVAILABLE,
            context={"attempts": attempts, **(context or {})},
        )
        self.attempts = attempts
