from __future__ import annotations

from pathlib import Path

from pathy_server.config import PathyConfig
from pathy_server.fs import PathResolver, home_directory, join_clamped
from pathy_server.scanner import PathKind

CONFIG = PathyConfig()


def _resolver(home: Path | None = None, windows: bool = False) -> PathResolver:
    return PathResolver(home=lambda: home, windows=windows)


def _document(tmp_path: Path) -> Path:
    return tmp_path / "proj" / "pkg" / "mod.py"


def test_file_relative_uses_document_directory(tmp_path: Path) -> None:
    resolution = _resolver().resolve(
        PathKind.FILE_RELATIVE, "./", CONFIG, document_path=_document(tmp_path)
    )

    assert [target.directory for target in resolution.targets] == [tmp_path / "proj" / "pkg"]
    assert resolution.targets[0].relative_dir == ""
    assert resolution.targets[0].origin == "file_dir"


def test_bare_relative_directory(tmp_path: Path) -> None:
    resolution = _resolver().resolve(
        PathKind.FILE_RELATIVE, "data/raw/", CONFIG, document_path=_document(tmp_path)
    )

    target = resolution.targets[0]
    assert target.directory == tmp_path / "proj" / "pkg" / "data" / "raw"
    assert target.relative_dir == "data/raw"


def test_parent_relative_walks_up(tmp_path: Path) -> None:
    resolution = _resolver().resolve(
        PathKind.PARENT_RELATIVE, "../", CONFIG, document_path=_document(tmp_path)
    )

    assert resolution.targets[0].directory == tmp_path / "proj"


def test_parent_traversal_clamps_at_root(tmp_path: Path) -> None:
    resolution = _resolver().resolve(
        PathKind.PARENT_RELATIVE, "../" * 50, CONFIG, document_path=_document(tmp_path)
    )

    assert resolution.targets[0].directory == Path(tmp_path.anchor)


def test_missing_document_path_falls_back_to_workspace_root(tmp_path: Path) -> None:
    resolution = _resolver().resolve(
        PathKind.FILE_RELATIVE, "./", CONFIG, workspace_root=tmp_path
    )

    assert resolution.targets[0].directory == tmp_path
    assert resolution.targets[0].origin == "workspace_root"


def test_no_base_directory_is_a_failure(tmp_path: Path) -> None:
    config = PathyConfig(workspace_root_strategy="disabled")

    resolution = _resolver().resolve(PathKind.FILE_RELATIVE, "./", config, workspace_root=tmp_path)

    assert resolution.targets == ()
    assert resolution.failure is not None


def test_workspace_root_strategy(tmp_path: Path) -> None:
    config = PathyConfig(base_dir="workspace_root")

    resolution = _resolver().resolve(
        PathKind.FILE_RELATIVE,
        "./",
        config,
        document_path=_document(tmp_path),
        workspace_root=tmp_path,
    )

    assert [target.directory for target in resolution.targets] == [tmp_path]


def test_both_lists_file_directory_first_and_dedupes(tmp_path: Path) -> None:
    config = PathyConfig(base_dir="both")

    distinct = _resolver().resolve(
        PathKind.FILE_RELATIVE,
        "./",
        config,
        document_path=_document(tmp_path),
        workspace_root=tmp_path,
    )
    same = _resolver().resolve(
        PathKind.FILE_RELATIVE,
        "./",
        config,
        document_path=tmp_path / "top.py",
        workspace_root=tmp_path,
    )

    assert [target.origin for target in distinct.targets] == ["file_dir", "workspace_root"]
    assert [target.directory for target in same.targets] == [tmp_path]


def test_home_paths(tmp_path: Path) -> None:
    home = tmp_path / "home"

    found = _resolver(home=home).resolve(PathKind.HOME, "~/Documents/", CONFIG)
    missing = _resolver(home=None).resolve(PathKind.HOME, "~/", CONFIG)

    assert found.targets[0].directory == home / "Documents"
    assert found.targets[0].relative_dir == "Documents"
    assert missing.targets == ()


def test_absolute_paths_join_from_root() -> None:
    resolution = _resolver().resolve(PathKind.ABSOLUTE, "/usr/share/", CONFIG)

    assert resolution.targets[0].directory == Path("/usr/share")
    assert resolution.targets[0].relative_dir == "usr/share"


def test_windows_forms_fail_on_other_hosts() -> None:
    drive = _resolver(windows=False).resolve(PathKind.DRIVE, "C:/Users/", CONFIG)
    unc = _resolver(windows=False).resolve(PathKind.UNC, "\\\\host\\share\\", CONFIG)

    assert drive.targets == ()
    assert unc.targets == ()


def test_windows_drive_resolves_on_windows_hosts() -> None:
    resolution = _resolver(windows=True).resolve(PathKind.DRIVE, "C:/Users/", CONFIG)

    assert len(resolution.targets) == 1
    assert resolution.targets[0].origin == "drive"


def test_inert_text_never_resolves() -> None:
    assert _resolver().resolve(PathKind.INERT, "~user/", CONFIG).targets == ()


def test_join_clamped_normalizes_lexically() -> None:
    assert join_clamped(Path("/a/b"), "./c/../d/") == Path("/a/b/d")
    assert join_clamped(Path("/a"), "..\\..\\..\\x") == Path("/x")


def test_home_directory_environment_lookup() -> None:
    assert home_directory({"HOME": "/h"}) == Path("/h")
    assert home_directory({"USERPROFILE": "/users/me"}) == Path("/users/me")
    assert home_directory({}) is None
