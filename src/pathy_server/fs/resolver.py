"""Resolve typed path text to the absolute directories to list."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from pathy_server.config import PathyConfig
from pathy_server.scanner import PathKind


@dataclass(slots=True, frozen=True)
class ListingTarget:
    """A directory to list and its position relative to the listing root.

    ``relative_dir`` is a POSIX path used for ignore-glob matching; it is empty
    when the directory is the root itself.
    """

    directory: Path
    relative_dir: str
    origin: str


@dataclass(slots=True, frozen=True)
class Resolution:
    """Listing targets in priority order, or the reason there are none."""

    targets: tuple[ListingTarget, ...]
    failure: str | None = None


def home_directory(environ: Mapping[str, str] | None = None) -> Path | None:
    """Return the user's home directory from HOME or USERPROFILE, if set."""
    env = os.environ if environ is None else environ
    for name in ("HOME", "USERPROFILE"):
        value = env.get(name)
        if value:
            return Path(value)
    return None


def join_clamped(base: Path, relative: str) -> Path:
    """Join and normalize lexically; ``..`` past the root stays at the root."""
    parts = [part for part in relative.replace("\\", "/").split("/") if part not in ("", ".")]
    current = base
    for part in parts:
        if part == "..":
            current = current.parent
            continue
        current = current / part
    return current


def _relative_posix(directory: Path, root: Path) -> str:
    try:
        relative = directory.relative_to(root).as_posix()
    except ValueError:
        return _anchorless(directory)
    return "" if relative == "." else relative


def _anchorless(directory: Path) -> str:
    parts = directory.parts
    if directory.anchor:
        parts = parts[1:]
    return "/".join(parts)


class PathResolver:
    """Maps a path kind and its directory part to listing targets."""

    def __init__(
        self,
        home: Callable[[], Path | None] = home_directory,
        windows: bool = os.name == "nt",
    ) -> None:
        self._home = home
        self._windows = windows

    def base_roots(
        self,
        config: PathyConfig,
        document_path: Path | None,
        workspace_root: Path | None,
    ) -> list[tuple[Path, str]]:
        """Return (root, origin) pairs for relative paths, file directory first."""
        root = workspace_root if config.workspace_root_strategy != "disabled" else None
        file_dir = document_path.parent if document_path is not None else None
        roots: list[tuple[Path, str]] = []
        if config.base_dir == "file_dir":
            if file_dir is not None:
                roots.append((file_dir, "file_dir"))
            elif root is not None:
                roots.append((root, "workspace_root"))
        elif config.base_dir == "workspace_root":
            if root is not None:
                roots.append((root, "workspace_root"))
        else:
            if file_dir is not None:
                roots.append((file_dir, "file_dir"))
            if root is not None:
                roots.append((root, "workspace_root"))
        return roots

    def resolve(
        self,
        kind: PathKind,
        dir_part: str,
        config: PathyConfig,
        document_path: Path | None = None,
        workspace_root: Path | None = None,
    ) -> Resolution:
        """Resolve ``dir_part`` (typed text up to the last separator) for ``kind``."""
        if kind is PathKind.INERT:
            return Resolution(targets=(), failure="path text is inert")
        if kind in (PathKind.FILE_RELATIVE, PathKind.PARENT_RELATIVE):
            return self._resolve_relative(dir_part, config, document_path, workspace_root)
        if kind is PathKind.ABSOLUTE:
            directory = join_clamped(Path("/"), dir_part)
            return self._single(directory, "absolute")
        if kind is PathKind.HOME:
            home = self._home()
            if home is None:
                return Resolution(targets=(), failure="home directory is not resolvable")
            directory = join_clamped(home, dir_part.lstrip("~"))
            return Resolution(
                targets=(
                    ListingTarget(
                        directory=directory,
                        relative_dir=_relative_posix(directory, home),
                        origin="home",
                    ),
                )
            )
        if not self._windows:
            return Resolution(targets=(), failure=f"{kind.value} paths resolve only on Windows")
        if kind is PathKind.DRIVE:
            drive = Path(dir_part[:3])
            return self._single(join_clamped(drive, dir_part[3:]), "drive")
        return self._single(Path(dir_part), "unc")

    def _resolve_relative(
        self,
        dir_part: str,
        config: PathyConfig,
        document_path: Path | None,
        workspace_root: Path | None,
    ) -> Resolution:
        roots = self.base_roots(config, document_path, workspace_root)
        if not roots:
            return Resolution(targets=(), failure="no base directory for relative path")
        targets: list[ListingTarget] = []
        seen: set[Path] = set()
        for root, origin in roots:
            directory = join_clamped(root, dir_part)
            if directory in seen:
                continue
            seen.add(directory)
            targets.append(
                ListingTarget(
                    directory=directory,
                    relative_dir=_relative_posix(directory, root),
                    origin=origin,
                )
            )
        return Resolution(targets=tuple(targets))

    @staticmethod
    def _single(directory: Path, origin: str) -> Resolution:
        return Resolution(
            targets=(
                ListingTarget(
                    directory=directory,
                    relative_dir=_anchorless(directory),
                    origin=origin,
                ),
            )
        )
