"""Conversions between LSP UTF-16 positions and Python string offsets."""

from __future__ import annotations


def utf16_length(text: str) -> int:
    """Return the number of UTF-16 code units needed for ``text``."""
    return sum(2 if ord(char) > 0xFFFF else 1 for char in text)


def utf16_to_index(line: str, character: int) -> int | None:
    """Map a UTF-16 column to a code point index, or None when out of range.

    A column that lands in the middle of a surrogate pair snaps to the start of
    that character.
    """
    if character < 0:
        return None
    units = 0
    for index, char in enumerate(line):
        if units >= character:
            return index
        units += 2 if ord(char) > 0xFFFF else 1
        if units > character:
            return index
    if units == character:
        return len(line)
    return None


def index_to_utf16(line: str, index: int) -> int:
    """Map a code point index to a UTF-16 column."""
    return utf16_length(line[: max(0, index)])


def split_lines(text: str) -> list[str]:
    """Split on LF keeping a trailing empty line, stripping CR from CRLF endings."""
    return [part[:-1] if part.endswith("\r") else part for part in text.split("\n")]


def line_at(text: str, line: int) -> str | None:
    """Return one line of ``text`` without its terminator."""
    if line < 0:
        return None
    lines = split_lines(text)
    if line >= len(lines):
        return None
    return lines[line]


def offset_at(text: str, line: int, character: int) -> int | None:
    """Return the absolute string offset for an LSP (line, UTF-16 column) position."""
    if line < 0:
        return None
    start = 0
    for _ in range(line):
        newline = text.find("\n", start)
        if newline == -1:
            return None
        start = newline + 1
    end = text.find("\n", start)
    raw_line = text[start:] if end == -1 else text[start:end]
    if raw_line.endswith("\r"):
        raw_line = raw_line[:-1]
    index = utf16_to_index(raw_line, character)
    if index is None:
        # Clients may send a column past the end of a shortened line; clamp.
        index = len(raw_line)
    return start + index
