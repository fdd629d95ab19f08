"""
ID and timestamp utilities for DocNotes.

- Notes: note_xxx
- Timestamps: integer epoch milliseconds (the persisted createdAt format)
"""

import time
from uuid import uuid4


def generate_note_id() -> str:
    """
    Generate unique Note ID.

    Returns:
        ID in format "note_xxx" where xxx is 12 hex characters
    """
    return f"note_{uuid4().hex[:12]}"


def current_millis() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return time.time_ns() // 1_000_000
