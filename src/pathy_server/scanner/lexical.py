"""Line-bounded string literal scanner for Python source.

The scanner is a small finite-state machine over one line of text. It never
backtracks, so cost is linear in the line length. A triple-quoted literal that
was opened, and left open, on the previous line is carried into the cursor
line; no further lookback is attempted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

QUOTE_CHARS = ("'", '"')
STRING_PREFIXES = frozenset(
    {"r", "u", "f", "b", "br", "rb", "fr", "rf", "t", "tr", "rt"}
)
_NAME_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")


class ScanState(Enum):
    """Scanner states."""

    CODE = "code"
    STRING = "string"
    ESCAPED = "escaped"
    COMMENT = "comment"


@dataclass(slots=True, frozen=True)
class LiteralSpan:
    """One string literal found on a line.

    ``prefix_start`` is the column of the prefix letters (or the first quote when
    there is no prefix); it is None when the literal was carried over from the
    previous line, in which case ``carried_prefix_start`` holds its column on
    that line. ``content_end`` is the column of the closing quote, or None when
    the literal is still open at end of line. ``holes`` are f-string
    placeholder brace columns ``(open, close)``; close is None when unclosed.
    """

    quote_char: str
    triple: bool
    is_raw: bool
    is_fstring: bool
    prefix_start: int | None
    content_start: int
    content_end: int | None
    holes: tuple[tuple[int, int | None], ...] = ()
    carried_prefix_start: int | None = None

    def contains(self, cursor: int) -> bool:
        """Return True when ``cursor`` sits between the quotes of this literal."""
        if cursor < self.content_start:
            return False
        return self.content_end is None or cursor <= self.content_end

    def in_placeholder(self, cursor: int) -> bool:
        """Return True when ``cursor`` is strictly inside an f-string ``{...}``."""
        for open_col, close_col in self.holes:
            if cursor > open_col and (close_col is None or cursor <= close_col):
                return True
        return False


@dataclass(slots=True, frozen=True)
class ScanResult:
    """Classification of a cursor position."""

    in_string: bool
    quote_char: str | None = None
    triple: bool = False
    is_raw: bool = False
    is_fstring: bool = False
    literal_start: int | None = None
    literal_end: int | None = None
    prefix_start: int | None = None
    continued: bool = False
    in_placeholder: bool = False
    holes: tuple[tuple[int, int | None], ...] = ()

    @property
    def quote_style(self) -> str | None:
        """Return ``single``, ``double`` or ``triple`` for literal positions."""
        if self.quote_char is None:
            return None
        if self.triple:
            return "triple"
        return "single" if self.quote_char == "'" else "double"

    @property
    def is_open(self) -> bool:
        """Return True when the literal has no closing quote on this line."""
        return self.quote_char is not None and self.literal_end is None

    def has_placeholder_in(self, start: int, end: int) -> bool:
        """Return True when an f-string placeholder opens in columns ``[start, end)``."""
        return any(start <= open_col < end for open_col, _ in self.holes)


NOT_IN_STRING = ScanResult(in_string=False)


@dataclass(slots=True)
class _Machine:
    line: str
    state: ScanState = ScanState.CODE
    index: int = 0
    quote_char: str = '"'
    triple: bool = False
    is_raw: bool = False
    is_fstring: bool = False
    prefix_start: int | None = None
    carried_prefix_start: int | None = None
    content_start: int = 0
    depth: int = 0
    hole_start: int = 0
    holes: list[tuple[int, int | None]] = field(default_factory=list)
    spans: list[LiteralSpan] = field(default_factory=list)

    def open_literal(self, quote_index: int, prefix: str, prefix_start: int) -> None:
        lowered = prefix.lower()
        self.quote_char = self.line[quote_index]
        self.triple = self.line.startswith(self.quote_char * 3, quote_index)
        self.is_raw = "r" in lowered
        self.is_fstring = "f" in lowered or "t" in lowered
        self.prefix_start = prefix_start
        self.carried_prefix_start = None
        self.content_start = quote_index + (3 if self.triple else 1)
        self.depth = 0
        self.holes = []
        self.state = ScanState.STRING
        self.index = self.content_start

    def close_literal(self, content_end: int | None) -> None:
        if self.depth > 0:
            self.holes.append((self.hole_start, content_end))
        self.spans.append(
            LiteralSpan(
                quote_char=self.quote_char,
                triple=self.triple,
                is_raw=self.is_raw,
                is_fstring=self.is_fstring,
                prefix_start=self.prefix_start,
                content_start=self.content_start,
                content_end=content_end,
                holes=tuple(self.holes),
                carried_prefix_start=self.carried_prefix_start,
            )
        )
        self.depth = 0
        self.holes = []
        self.state = ScanState.CODE


@dataclass(slots=True, frozen=True)
class _CarriedLiteral:
    """Open triple-quoted literal left at the end of the previous line."""

    quote_char: str
    is_raw: bool
    is_fstring: bool
    prefix_start: int


def _step_code(machine: _Machine) -> None:
    line = machine.line
    char = line[machine.index]
    if char == "#":
        machine.state = ScanState.COMMENT
        return
    if char in QUOTE_CHARS:
        prefix_start = machine.index
        while prefix_start > 0 and line[prefix_start - 1] in _NAME_CHARS:
            prefix_start -= 1
        prefix = line[prefix_start : machine.index]
        if prefix and prefix.lower() not in STRING_PREFIXES:
            prefix, prefix_start = "", machine.index
        machine.open_literal(machine.index, prefix, prefix_start)
        return
    machine.index += 1


def _step_string(machine: _Machine) -> None:
    line = machine.line
    index = machine.index
    char = line[index]
    if char == "\\":
        machine.state = ScanState.ESCAPED
        machine.index += 1
        return
    if machine.is_fstring:
        if char == "{":
            if machine.depth == 0 and line.startswith("{{", index):
                machine.index += 2
                return
            if machine.depth == 0:
                machine.hole_start = index
            machine.depth += 1
            machine.index += 1
            return
        if char == "}" and machine.depth > 0:
            machine.depth -= 1
            if machine.depth == 0:
                machine.holes.append((machine.hole_start, index))
            machine.index += 1
            return
        if char in QUOTE_CHARS and machine.depth > 0:
            # Nested literal inside a placeholder expression; skip it when it closes.
            nested_end = line.find(char, index + 1)
            if nested_end != -1:
                machine.index = nested_end + 1
                return
    if char == machine.quote_char and (
        not machine.triple or line.startswith(machine.quote_char * 3, index)
    ):
        machine.close_literal(index)
        machine.index = index + (3 if machine.triple else 1)
        return
    machine.index += 1


def _step_escaped(machine: _Machine) -> None:
    machine.state = ScanState.STRING
    machine.index += 1


def _step_comment(machine: _Machine) -> None:
    machine.index = len(machine.line)


_TRANSITIONS: dict[ScanState, Callable[[_Machine], None]] = {
    ScanState.CODE: _step_code,
    ScanState.STRING: _step_string,
    ScanState.ESCAPED: _step_escaped,
    ScanState.COMMENT: _step_comment,
}


def scan_literals(line: str, carried: _CarriedLiteral | None = None) -> list[LiteralSpan]:
    """Return every literal span on ``line`` in order, the last possibly open."""
    machine = _Machine(line=line)
    if carried is not None:
        machine.state = ScanState.STRING
        machine.quote_char = carried.quote_char
        machine.triple = True
        machine.is_raw = carried.is_raw
        machine.is_fstring = carried.is_fstring
        machine.prefix_start = None
        machine.carried_prefix_start = carried.prefix_start
        machine.content_start = 0
    length = len(line)
    while machine.index < length:
        _TRANSITIONS[machine.state](machine)
    if machine.state in (ScanState.STRING, ScanState.ESCAPED):
        machine.close_literal(None)
    return machine.spans


def carried_literal(previous_line: str | None) -> _CarriedLiteral | None:
    """Return the triple-quoted literal left open by ``previous_line``, if any.

    Only a literal opened on that same line qualifies.
    """
    if not previous_line:
        return None
    spans = scan_literals(previous_line)
    if not spans:
        return None
    last = spans[-1]
    if last.content_end is not None or not last.triple or last.prefix_start is None:
        return None
    return _CarriedLiteral(
        quote_char=last.quote_char,
        is_raw=last.is_raw,
        is_fstring=last.is_fstring,
        prefix_start=last.prefix_start,
    )


def scan_line(line: str, cursor: int, previous_line: str | None = None) -> ScanResult:
    """Classify ``cursor`` (a column in ``line``) as literal text or code."""
    if cursor < 0 or cursor > len(line):
        return NOT_IN_STRING
    for span in scan_literals(line, carried_literal(previous_line)):
        if not span.contains(cursor):
            continue
        placeholder = span.is_fstring and span.in_placeholder(cursor)
        continued = span.prefix_start is None
        return ScanResult(
            in_string=not placeholder,
            quote_char=span.quote_char,
            triple=span.triple,
            is_raw=span.is_raw,
            is_fstring=span.is_fstring,
            literal_start=span.content_start,
            literal_end=span.content_end,
            prefix_start=span.carried_prefix_start if continued else span.prefix_start,
            continued=continued,
            in_placeholder=placeholder,
            holes=span.holes if span.is_fstring else (),
        )
    return NOT_IN_STRING
