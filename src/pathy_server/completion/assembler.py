"""Filter, order and format directory entries into completion candidates."""

from __future__ import annotations

import fnmatch
from collections.abc import Sequence
from dataclasses import dataclass

from pathy_server.completion.models import CompletionCandidate, TextRange
from pathy_server.config import PathyConfig
from pathy_server.fs import DirEntry, ListingTarget


@dataclass(slots=True, frozen=True)
class Listing:
    """Entries read for one listing target."""

    target: ListingTarget
    entries: tuple[DirEntry, ...]


@dataclass(slots=True, frozen=True)
class InsertionStyle:
    """How entry names are written into the enclosing literal."""

    separator: str = "/"
    escape_backslashes: bool = True
    quote_char: str | None = None
    triple: bool = False
    leading_separator: bool = False


def should_ignore(relative_path: str, is_dir: bool, ignore_globs: tuple[str, ...]) -> bool:
    """Return True when an entry path matches configured ignore globs."""
    candidates = [relative_path, f"/{relative_path}"]
    if is_dir:
        candidates.extend((f"{relative_path}/", f"/{relative_path}/"))
    return any(
        fnmatch.fnmatch(candidate, pattern) for pattern in ignore_globs for candidate in candidates
    )


def format_insert_text(entry: DirEntry, config: PathyConfig, style: InsertionStyle) -> str | None:
    """Return the text to insert for ``entry``, or None when it cannot be written."""
    name = entry.name
    if style.escape_backslashes:
        name = name.replace("\\", "\\\\")
    if style.quote_char is not None and not style.triple and style.quote_char in name:
        if not style.escape_backslashes:
            return None
        name = name.replace(style.quote_char, f"\\{style.quote_char}")
    separator = style.separator
    if separator == "\\" and style.escape_backslashes:
        separator = "\\\\"
    if entry.is_dir and config.directory_trailing_slash:
        name = f"{name}{separator}"
    if style.leading_separator:
        name = f"{separator}{name}"
    return name


def _is_visible(entry: DirEntry, prefix: str, config: PathyConfig) -> bool:
    if not entry.name.startswith(prefix):
        return False
    if entry.name.startswith(".") and not config.show_hidden:
        return False
    if entry.is_dir:
        return config.include_directories
    return config.include_files


def assemble_candidates(
    listings: Sequence[Listing],
    prefix: str,
    replacement_range: TextRange,
    config: PathyConfig,
    style: InsertionStyle,
) -> list[CompletionCandidate]:
    """Build ordered, capped candidates from listings in priority order."""
    seen: set[str] = set()
    selected: list[tuple[DirEntry, ListingTarget]] = []
    for listing in listings:
        target = listing.target
        for entry in listing.entries:
            if not _is_visible(entry, prefix, config):
                continue
            absolute = str(target.directory / entry.name)
            if absolute in seen:
                continue
            relative = f"{target.relative_dir}/{entry.name}" if target.relative_dir else entry.name
            if should_ignore(relative, entry.is_dir, config.ignore_globs):
                continue
            seen.add(absolute)
            selected.append((entry, target))

    if config.include_directories and config.include_files:
        selected.sort(key=lambda item: (not item[0].is_dir, item[0].name))
    else:
        selected.sort(key=lambda item: item[0].name)

    candidates: list[CompletionCandidate] = []
    for entry, target in selected:
        if len(candidates) >= config.max_results:
            break
        insert_text = format_insert_text(entry, config, style)
        if insert_text is None:
            continue
        candidates.append(
            CompletionCandidate(
                label=entry.name,
                insert_text=insert_text,
                replacement_range=replacement_range,
                is_directory=entry.is_dir,
                detail=str(target.directory),
            )
        )
    return candidates
