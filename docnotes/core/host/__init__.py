"""
Document host integrations for DocNotes.

- DocumentHost, EditorHandle: Capability interfaces the controller depends on
- LocalDocumentHost: Headless host over a directory of text documents
"""

from docnotes.core.host.base import DocumentHandle, DocumentHost, EditorHandle
from docnotes.core.host.local import LocalDocumentHost, LocalEditor

__all__ = [
    "DocumentHandle",
    "DocumentHost",
    "EditorHandle",
    "LocalDocumentHost",
    "LocalEditor",
]
