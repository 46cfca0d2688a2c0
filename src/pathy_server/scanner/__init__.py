"""Lexical analysis of the line under the cursor."""

from .lexical import (
    NOT_IN_STRING,
    LiteralSpan,
    ScanResult,
    ScanState,
    carried_literal,
    scan_line,
    scan_literals,
)
from .prefixes import (
    PathKind,
    PrefixRules,
    classify_path,
    has_fallback_prefix,
    locate_path_start,
    match_path_prefix,
)
from .segment import (
    PathQuery,
    Segment,
    build_path_query,
    extract_segment,
    last_separator,
    unescape_path_text,
)

__all__ = [
    "LiteralSpan",
    "NOT_IN_STRING",
    "PathKind",
    "PathQuery",
    "PrefixRules",
    "ScanResult",
    "ScanState",
    "Segment",
    "build_path_query",
    "carried_literal",
    "classify_path",
    "extract_segment",
    "has_fallback_prefix",
    "last_separator",
    "locate_path_start",
    "match_path_prefix",
    "scan_line",
    "scan_literals",
    "unescape_path_text",
]
