"""Mapping between document URIs and filesystem paths."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import unquote, urlsplit

_DRIVE_PATH_PATTERN = re.compile(r"^/[A-Za-z]:[/\\]?")


def uri_to_path(uri: str) -> Path | None:
    """Return the filesystem path behind a ``file:`` URI, or None for other schemes."""
    if not uri:
        return None
    parts = urlsplit(uri)
    if parts.scheme.lower() != "file":
        return None
    path = unquote(parts.path)
    if _DRIVE_PATH_PATTERN.match(path):
        path = path[1:]
    if parts.netloc and parts.netloc.lower() != "localhost":
        path = f"//{parts.netloc}{path}"
    if not path:
        return None
    return Path(path)


def root_from_initialize(params: dict[str, object]) -> Path | None:
    """Pick the workspace root from LSP initialize params (rootUri, rootPath, folders)."""
    root_uri = params.get("rootUri")
    if isinstance(root_uri, str):
        resolved = uri_to_path(root_uri)
        if resolved is not None:
            return resolved
    root_path = params.get("rootPath")
    if isinstance(root_path, str) and root_path:
        return Path(root_path)
    folders = params.get("workspaceFolders")
    if isinstance(folders, list):
        for folder in folders:
            if not isinstance(folder, dict):
                continue
            folder_uri = folder.get("uri")
            if isinstance(folder_uri, str):
                resolved = uri_to_path(folder_uri)
                if resolved is not None:
                    return resolved
    return None
