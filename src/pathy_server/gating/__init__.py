"""Context gating for path completions."""

from .gate import (
    REASON_CONTEXT_MATCH,
    REASON_MANUAL,
    REASON_PREFIX_FALLBACK,
    SUPPRESS,
    CallContext,
    GatingDecision,
    decide,
    detect_call_context,
    is_path_call,
    is_path_context,
    is_path_join_context,
    prefix_rules,
)
from .patterns import (
    DEFAULT_CALL_PATTERNS,
    PATH_KEYWORD_NAMES,
    PathCallPattern,
    build_call_patterns,
    find_pattern,
    pattern_from_name,
)

__all__ = [
    "CallContext",
    "DEFAULT_CALL_PATTERNS",
    "GatingDecision",
    "PATH_KEYWORD_NAMES",
    "PathCallPattern",
    "REASON_CONTEXT_MATCH",
    "REASON_MANUAL",
    "REASON_PREFIX_FALLBACK",
    "SUPPRESS",
    "build_call_patterns",
    "decide",
    "detect_call_context",
    "find_pattern",
    "is_path_call",
    "is_path_context",
    "is_path_join_context",
    "pattern_from_name",
    "prefix_rules",
]
