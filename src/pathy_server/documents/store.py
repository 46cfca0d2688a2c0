"""In-memory store holding the latest text snapshot of each open document."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from pathy_server.documents.positions import line_at, offset_at
from pathy_server.documents.uris import uri_to_path
from pathy_server.logging import DiagnosticLogger

PYTHON_LANGUAGE_IDS = frozenset({"python"})
PYTHON_SUFFIXES = (".py", ".pyi", ".pyw")


@dataclass(slots=True, frozen=True)
class Document:
    """Immutable snapshot of an open document."""

    uri: str
    text: str
    version: int
    language_id: str | None = None

    @property
    def path(self) -> Path | None:
        """Return the backing file path, or None for unsaved/virtual documents."""
        return uri_to_path(self.uri)

    def line(self, number: int) -> str | None:
        """Return one zero-based line of text without its terminator."""
        return line_at(self.text, number)


@dataclass(slots=True, frozen=True)
class TextChange:
    """One content change; no range means the whole text is replaced.

    Range positions are (line, UTF-16 character) pairs as sent by LSP clients.
    """

    text: str
    start: tuple[int, int] | None = None
    end: tuple[int, int] | None = None


def is_python_document(document: Document) -> bool:
    """Return True for documents the Python string scanner understands."""
    if document.language_id is not None and document.language_id.lower() in PYTHON_LANGUAGE_IDS:
        return True
    return document.uri.lower().endswith(PYTHON_SUFFIXES)


def apply_change(text: str, change: TextChange) -> str:
    """Apply one full or ranged change to ``text``."""
    if change.start is None or change.end is None:
        return change.text
    start = offset_at(text, *change.start)
    end = offset_at(text, *change.end)
    if start is None:
        start = len(text)
    if end is None:
        end = len(text)
    if end < start:
        start, end = end, start
    return text[:start] + change.text + text[end:]


class DocumentStore:
    """Thread-safe mapping of document URI to its latest snapshot."""

    def __init__(self, logger: DiagnosticLogger | None = None) -> None:
        self._lock = threading.Lock()
        self._documents: dict[str, Document] = {}
        self._logger = logger

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def open(
        self, uri: str, text: str, version: int = 0, language_id: str | None = None
    ) -> Document:
        """Store a freshly opened document, replacing any previous snapshot."""
        document = Document(uri=uri, text=text, version=version, language_id=language_id)
        with self._lock:
            self._documents[uri] = document
        return document

    def change(
        self, uri: str, version: int | None, changes: Sequence[TextChange]
    ) -> Document | None:
        """Apply changes in order; stale versions and unknown documents are ignored."""
        with self._lock:
            current = self._documents.get(uri)
            if current is None:
                self._debug("document_change_unknown", "Change for unopened document.", uri=uri)
                return None
            if version is not None and version <= current.version:
                self._debug(
                    "document_change_stale",
                    "Ignoring change with non-increasing version.",
                    uri=uri,
                    version=version,
                    current_version=current.version,
                )
                return None
            text = current.text
            for change in changes:
                text = apply_change(text, change)
            updated = replace(
                current,
                text=text,
                version=version if version is not None else current.version + 1,
            )
            self._documents[uri] = updated
        return updated

    def close(self, uri: str) -> bool:
        """Forget a document; return True if it was open."""
        with self._lock:
            return self._documents.pop(uri, None) is not None

    def get(self, uri: str) -> Document | None:
        """Return the latest snapshot for ``uri``."""
        with self._lock:
            return self._documents.get(uri)

    def _debug(self, event: str, message: str, **fields: object) -> None:
        if self._logger is not None:
            self._logger.debug(event, message, **fields)
