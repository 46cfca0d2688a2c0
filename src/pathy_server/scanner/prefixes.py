"""Lexical classification of typed path text by its leading prefix."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

WINDOWS_DRIVE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


class PathKind(Enum):
    """How typed path text anchors to the filesystem."""

    FILE_RELATIVE = "file_relative"
    PARENT_RELATIVE = "parent_relative"
    ABSOLUTE = "absolute"
    HOME = "home"
    DRIVE = "drive"
    UNC = "unc"
    INERT = "inert"


@dataclass(slots=True, frozen=True)
class PrefixRules:
    """Which optional prefix families are recognized."""

    expand_tilde: bool = True
    windows_drive: bool = True
    windows_unc: bool = True


def match_path_prefix(text: str, rules: PrefixRules) -> PathKind | None:
    """Return the kind for an explicit path prefix, or None when there is none.

    ``INERT`` marks text that looks like a path but must not complete, such as
    a disabled Windows form or ``~user``.
    """
    if text.startswith("\\\\"):
        return PathKind.UNC if rules.windows_unc else PathKind.INERT
    if WINDOWS_DRIVE_PATTERN.match(text):
        return PathKind.DRIVE if rules.windows_drive else PathKind.INERT
    if text.startswith(("../", "..\\")):
        return PathKind.PARENT_RELATIVE
    if text.startswith(("./", ".\\")):
        return PathKind.FILE_RELATIVE
    if text.startswith("/"):
        return PathKind.ABSOLUTE
    if text.startswith("~") and rules.expand_tilde:
        if text == "~" or text.startswith(("~/", "~\\")):
            return PathKind.HOME
        return PathKind.INERT
    return None


def has_fallback_prefix(text: str, rules: PrefixRules) -> bool:
    """Return True when ``text`` unambiguously looks like a path."""
    kind = match_path_prefix(text, rules)
    return kind is not None and kind is not PathKind.INERT


def classify_path(text: str, rules: PrefixRules) -> PathKind:
    """Classify typed path text; text without a prefix is file-relative."""
    return match_path_prefix(text, rules) or PathKind.FILE_RELATIVE


def locate_path_start(content: str, rules: PrefixRules) -> int | None:
    """Return the index of the last whitespace-bounded path prefix in ``content``."""
    last_start: int | None = None
    for index in range(len(content)):
        if index > 0 and not content[index - 1].isspace():
            continue
        # Every prefix is decided by at most three characters.
        if has_fallback_prefix(content[index : index + 3], rules):
            last_start = index
    return last_start
