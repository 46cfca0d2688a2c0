"""Completion request and result models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class CompletionRequest:
    """Cursor position inside an open document.

    ``column`` is a code point index into the line; transports speaking UTF-16
    convert before building the request.
    """

    uri: str
    line: int
    column: int
    manual: bool = False


@dataclass(slots=True, frozen=True)
class TextRange:
    """Half-open column range on one line."""

    line: int
    start: int
    end: int


@dataclass(slots=True, frozen=True)
class CompletionCandidate:
    """One filesystem entry offered for insertion."""

    label: str
    insert_text: str
    replacement_range: TextRange
    is_directory: bool
    detail: str = ""
