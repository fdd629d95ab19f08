"""Core components for DocNotes: record storage, document host, note store."""
