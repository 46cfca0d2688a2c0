"""Document snapshots, positions and URIs."""

from .positions import index_to_utf16, line_at, offset_at, split_lines, utf16_to_index
from .store import Document, DocumentStore, TextChange, apply_change, is_python_document
from .uris import root_from_initialize, uri_to_path

__all__ = [
    "Document",
    "DocumentStore",
    "TextChange",
    "apply_change",
    "index_to_utf16",
    "is_python_document",
    "line_at",
    "offset_at",
    "root_from_initialize",
    "split_lines",
    "uri_to_path",
    "utf16_to_index",
]
