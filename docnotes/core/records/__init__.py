"""
Record storage implementations for DocNotes.

Available backends:
- FileRecordStorage: One file per record inside a folder per namespace
- SQLiteRecordStorage: Single-file database, one row per record
"""

from docnotes.core.records.base import RecordStorage
from docnotes.core.records.factory import RecordStorageFactory
from docnotes.core.records.filesystem import FileRecordStorage, atomic_write_text
from docnotes.core.records.sqlite_store import SQLiteRecordStorage

__all__ = [
    "RecordStorage",
    "RecordStorageFactory",
    "FileRecordStorage",
    "SQLiteRecordStorage",
    "atomic_write_text",
]
