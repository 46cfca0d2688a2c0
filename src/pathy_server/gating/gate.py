"""Decide whether a literal is a plausible path argument."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pathy_server.config import PathyConfig
from pathy_server.gating.patterns import (
    PATH_KEYWORD_NAMES,
    PathCallPattern,
    build_call_patterns,
    find_pattern,
)
from pathy_server.scanner import PrefixRules, has_fallback_prefix

CALL_WINDOW_CHARS = 300
JOIN_WINDOW_CHARS = 120

REASON_CONTEXT_MATCH = "context_match"
REASON_PREFIX_FALLBACK = "prefix_fallback"
REASON_MANUAL = "manual"

_KEYWORD_ARG_PATTERN = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\s*=")
_CALL_NAME_PATTERN = re.compile(r"[A-Za-z0-9_.]+$")
_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass(slots=True, frozen=True)
class GatingDecision:
    """Offer with a reason, or suppress."""

    offer: bool
    reason: str | None = None


SUPPRESS = GatingDecision(offer=False)


@dataclass(slots=True, frozen=True)
class CallContext:
    """Innermost open call enclosing a literal."""

    full_name: str
    arg_is_first: bool
    keyword: str | None


def prefix_rules(config: PathyConfig) -> PrefixRules:
    """Project the prefix-related options out of a config snapshot."""
    return PrefixRules(
        expand_tilde=config.expand_tilde,
        windows_drive=config.windows_enable_drive_prefix,
        windows_unc=config.windows_enable_unc,
    )


def detect_call_context(preceding_text: str) -> CallContext | None:
    """Find the innermost unclosed call whose argument list the literal starts in."""
    window = preceding_text[-CALL_WINDOW_CHARS:]
    depth = 0
    open_index: int | None = None
    for index in range(len(window) - 1, -1, -1):
        char = window[index]
        if char in _CLOSERS:
            depth += 1
        elif char in _OPENERS:
            if depth == 0:
                if char != "(":
                    return None
                open_index = index
                break
            depth -= 1
    if open_index is None:
        return None
    name_match = _CALL_NAME_PATTERN.search(window[:open_index].rstrip())
    if name_match is None:
        return None
    full_name = name_match.group(0).strip(".")
    if not full_name or full_name[0].isdigit():
        return None

    arg_text = window[open_index + 1 :]
    has_comma = "," in arg_text
    last_arg = arg_text.rsplit(",", 1)[-1].strip()
    if not last_arg:
        return CallContext(full_name=full_name, arg_is_first=not has_comma, keyword=None)
    keyword_match = _KEYWORD_ARG_PATTERN.fullmatch(last_arg)
    if keyword_match is not None:
        return CallContext(
            full_name=full_name, arg_is_first=False, keyword=keyword_match.group(1)
        )
    return CallContext(full_name=full_name, arg_is_first=False, keyword=None)


def is_path_call(context: CallContext, patterns: tuple[PathCallPattern, ...]) -> bool:
    """Return True when the literal fills a path role of the detected call."""
    pattern = find_pattern(context.full_name, patterns)
    if context.arg_is_first:
        return pattern is not None and pattern.positional
    if context.keyword is None:
        return False
    if context.keyword in PATH_KEYWORD_NAMES:
        return True
    return pattern is not None and context.keyword in pattern.keywords


def is_path_join_context(preceding_text: str) -> bool:
    """Return True for ``Path(...) / "`` style joins."""
    window = preceding_text[-JOIN_WINDOW_CHARS:]
    if not window.rstrip().endswith("/"):
        return False
    return "Path(" in window


def is_path_context(preceding_text: str, patterns: tuple[PathCallPattern, ...]) -> bool:
    """Return True when the text before the opening quote names a path position."""
    context = detect_call_context(preceding_text)
    if context is not None and is_path_call(context, patterns):
        return True
    return is_path_join_context(preceding_text)


def decide(
    preceding_text: str,
    path_text: str,
    config: PathyConfig,
    manual: bool = False,
) -> GatingDecision:
    """Apply the configured gating mode to one literal position."""
    mode = config.context_gating
    if mode == "off":
        if manual:
            return GatingDecision(offer=True, reason=REASON_MANUAL)
        return SUPPRESS
    patterns = build_call_patterns(config.extra_path_calls)
    if is_path_context(preceding_text, patterns):
        return GatingDecision(offer=True, reason=REASON_CONTEXT_MATCH)
    if config.path_prefix_fallback and has_fallback_prefix(path_text, prefix_rules(config)):
        if mode == "smart" or config.is_explicit("path_prefix_fallback"):
            return GatingDecision(offer=True, reason=REASON_PREFIX_FALLBACK)
    return SUPPRESS
