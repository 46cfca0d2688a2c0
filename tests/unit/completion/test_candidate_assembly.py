from __future__ import annotations

from pathlib import Path

import pytest

from pathy_server.completion import (
    InsertionStyle,
    Listing,
    TextRange,
    assemble_candidates,
    should_ignore,
)
from pathy_server.config import PathyConfig
from pathy_server.fs import DirEntry, ListingTarget

RANGE = TextRange(line=0, start=5, end=5)
STYLE = InsertionStyle()
ENTRIES = (
    DirEntry(name="b.txt", is_dir=False),
    DirEntry(name="a", is_dir=True),
    DirEntry(name="a.txt", is_dir=False),
    DirEntry(name=".hidden", is_dir=False),
    DirEntry(name=".git", is_dir=True),
    DirEntry(name="z", is_dir=True),
)


def _listing(directory: str = "/w", relative_dir: str = "", entries=ENTRIES) -> Listing:
    target = ListingTarget(directory=Path(directory), relative_dir=relative_dir, origin="file_dir")
    return Listing(target=target, entries=tuple(entries))


def _labels(config: PathyConfig, prefix: str = "", listings=None) -> list[str]:
    candidates = assemble_candidates(listings or [_listing()], prefix, RANGE, config, STYLE)
    return [candidate.label for candidate in candidates]


def test_directories_first_then_files_by_name() -> None:
    assert _labels(PathyConfig()) == ["a", "z", "a.txt", "b.txt"]


def test_prefix_filter_is_case_sensitive() -> None:
    assert _labels(PathyConfig(), prefix="a") == ["a", "a.txt"]
    assert _labels(PathyConfig(), prefix="A") == []


def test_hidden_entries_need_show_hidden_and_git_stays_ignored() -> None:
    labels = _labels(PathyConfig(show_hidden=True), prefix=".")

    assert labels == [".hidden"]
    assert ".git" not in _labels(PathyConfig(show_hidden=True))


def test_kind_switches() -> None:
    assert _labels(PathyConfig(include_files=False)) == ["a", "z"]
    assert _labels(PathyConfig(include_directories=False)) == ["a.txt", "b.txt"]


@pytest.mark.parametrize("limit", [1, 2, 3, 4, 5])
def test_results_never_exceed_max_results(limit: int) -> None:
    assert len(_labels(PathyConfig(max_results=limit))) == min(limit, 4)


def test_ignore_globs_match_nested_directories() -> None:
    nested = _listing(
        relative_dir="src",
        entries=[DirEntry(name="__pycache__", is_dir=True), DirEntry(name="app.py", is_dir=False)],
    )

    assert _labels(PathyConfig(), listings=[nested]) == ["app.py"]


def test_should_ignore_matches_directory_forms() -> None:
    globs = ("**/.git/**", "**/node_modules/**")

    assert should_ignore(".git", True, globs) is True
    assert should_ignore("web/node_modules", True, globs) is True
    assert should_ignore(".gitignore", False, globs) is False
    assert should_ignore("debug.log", False, ("*.log",)) is True


def test_duplicate_absolute_paths_collapse_keeping_first_listing() -> None:
    first = _listing("/w", entries=[DirEntry(name="same.txt", is_dir=False)])
    again = _listing("/w", entries=[DirEntry(name="same.txt", is_dir=False)])

    candidates = assemble_candidates([first, again], "", RANGE, PathyConfig(), STYLE)

    assert len(candidates) == 1


def test_same_name_in_distinct_directories_keeps_priority_order() -> None:
    file_dir = _listing("/w/pkg", entries=[DirEntry(name="shared.txt", is_dir=False)])
    root = _listing("/w", entries=[DirEntry(name="shared.txt", is_dir=False)])

    candidates = assemble_candidates([file_dir, root], "", RANGE, PathyConfig(), STYLE)

    assert [candidate.detail for candidate in candidates] == [str(Path("/w/pkg")), str(Path("/w"))]


def test_candidates_carry_replacement_range_and_kind() -> None:
    candidates = assemble_candidates([_listing()], "a", RANGE, PathyConfig(), STYLE)

    assert all(candidate.replacement_range == RANGE for candidate in candidates)
    assert [candidate.is_directory for candidate in candidates] == [True, False]
