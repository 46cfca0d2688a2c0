"""Extraction of the path segment under the cursor."""

from __future__ import annotations

from dataclasses import dataclass

from pathy_server.scanner.lexical import ScanResult
from pathy_server.scanner.prefixes import PrefixRules, locate_path_start

PATH_SEPARATORS = ("/", "\\")


@dataclass(slots=True, frozen=True)
class Segment:
    """Text between the last separator and the cursor, with its column range."""

    text: str
    start: int
    end: int


@dataclass(slots=True, frozen=True)
class PathQuery:
    """Typed path split into its directory part and the segment being completed."""

    path_text: str
    path_start: int
    dir_part: str
    segment: Segment
    needs_separator: bool = False


def last_separator(text: str) -> int:
    """Return the index of the last ``/`` or ``\\`` in ``text``, or -1."""
    return max(text.rfind(separator) for separator in PATH_SEPARATORS)


def extract_segment(line: str, content_start: int, cursor: int) -> Segment:
    """Return the segment for a cursor inside literal content starting at ``content_start``."""
    cursor = max(cursor, content_start)
    separator = last_separator(line[content_start:cursor])
    start = content_start + separator + 1
    return Segment(text=line[start:cursor], start=start, end=cursor)


def build_path_query(
    line: str, scan: ScanResult, cursor: int, rules: PrefixRules
) -> PathQuery | None:
    """Locate the typed path inside the literal and split it at the cursor."""
    if not scan.in_string or scan.literal_start is None:
        return None
    content_start = scan.literal_start
    offset = locate_path_start(line[content_start:cursor], rules)
    path_start = content_start + (offset or 0)
    path_text = line[path_start:cursor]
    if path_text == "~" and rules.expand_tilde:
        return PathQuery(
            path_text=path_text,
            path_start=path_start,
            dir_part="~/",
            segment=Segment(text="", start=cursor, end=cursor),
            needs_separator=True,
        )
    segment = extract_segment(line, path_start, cursor)
    return PathQuery(
        path_text=path_text,
        path_start=path_start,
        dir_part=line[path_start : segment.start],
        segment=segment,
    )


def unescape_path_text(text: str, is_raw: bool) -> str:
    """Collapse doubled backslashes written inside a non-raw literal."""
    if is_raw:
        return text
    return text.replace("\\\\", "\\")
