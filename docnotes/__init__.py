"""
DocNotes - per-document annotation store.

Notes are attached to a document, optionally anchored to a text selection,
and persisted as one record per document.
"""

__version__ = "0.1.0"
