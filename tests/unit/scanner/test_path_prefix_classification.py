from __future__ import annotations

import pytest

from pathy_server.scanner import (
    PathKind,
    PrefixRules,
    classify_path,
    has_fallback_prefix,
    locate_path_start,
    match_path_prefix,
)

RULES = PrefixRules()


@pytest.mark.parametrize(
    ("text", "kind"),
    [
        ("./", PathKind.FILE_RELATIVE),
        (".\\data", PathKind.FILE_RELATIVE),
        ("../", PathKind.PARENT_RELATIVE),
        ("/", PathKind.ABSOLUTE),
        ("~", PathKind.HOME),
        ("~/x", PathKind.HOME),
        ("C:\\", PathKind.DRIVE),
        ("C:/", PathKind.DRIVE),
        ("\\\\server\\share\\", PathKind.UNC),
    ],
)
def test_fallback_prefixes(text: str, kind: PathKind) -> None:
    assert match_path_prefix(text, RULES) is kind
    assert has_fallback_prefix(text, RULES) is True


@pytest.mark.parametrize("text", ["hello world", "data/x", "", ".hidden", "C:", "~user"])
def test_text_without_fallback_prefix(text: str) -> None:
    assert has_fallback_prefix(text, RULES) is False


def test_disabled_windows_forms_are_inert() -> None:
    rules = PrefixRules(windows_drive=False, windows_unc=False)

    assert match_path_prefix("C:/x", rules) is PathKind.INERT
    assert match_path_prefix("\\\\host\\share", rules) is PathKind.INERT
    assert has_fallback_prefix("C:/x", rules) is False


def test_tilde_user_form_is_inert() -> None:
    assert match_path_prefix("~user/x", RULES) is PathKind.INERT


def test_tilde_without_expansion_is_a_plain_name() -> None:
    rules = PrefixRules(expand_tilde=False)

    assert match_path_prefix("~/x", rules) is None
    assert classify_path("~/x", rules) is PathKind.FILE_RELATIVE


def test_unprefixed_text_is_file_relative() -> None:
    assert classify_path("data/x", RULES) is PathKind.FILE_RELATIVE
    assert classify_path("../a", RULES) is PathKind.PARENT_RELATIVE
    assert classify_path("/a", RULES) is PathKind.ABSOLUTE


def test_locate_path_start_uses_last_whitespace_bounded_prefix() -> None:
    assert locate_path_start("cat ./x", RULES) == 4
    assert locate_path_start("./a ./b", RULES) == 4
    assert locate_path_start("./a", RULES) == 0
    assert locate_path_start("abc", RULES) is None
    assert locate_path_start("a/b", RULES) is None
