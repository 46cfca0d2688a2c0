"""Single-level directory enumeration."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pathy_server.config import PathyConfig


@dataclass(slots=True, frozen=True)
class DirEntry:
    """One directory entry name with its directory classification."""

    name: str
    is_dir: bool


class DirectoryReader(Protocol):
    """Lists one directory level; raises OSError when it cannot."""

    def read_dir(self, directory: Path) -> list[DirEntry]: ...


@dataclass(slots=True, frozen=True)
class ScandirReader:
    """``os.scandir`` based reader honoring a stat strategy and an entry cap."""

    stat_strategy: str = "lazy"
    max_entries: int = 2_000

    def read_dir(self, directory: Path) -> list[DirEntry]:
        """Enumerate ``directory`` without recursing; stop at ``max_entries``."""
        entries: list[DirEntry] = []
        with os.scandir(directory) as iterator:
            for entry in iterator:
                if len(entries) >= self.max_entries:
                    break
                is_dir = self._classify(entry)
                if is_dir is None:
                    continue
                entries.append(DirEntry(name=entry.name, is_dir=is_dir))
        return entries

    def _classify(self, entry: os.DirEntry[str]) -> bool | None:
        try:
            if self.stat_strategy == "none":
                return entry.is_dir(follow_symlinks=False)
            if self.stat_strategy == "eager":
                return stat.S_ISDIR(os.stat(entry.path).st_mode)
            return entry.is_dir()
        except OSError:
            # Broken entries are dropped under eager stat and read as files otherwise.
            return None if self.stat_strategy == "eager" else False


def reader_for_config(config: PathyConfig) -> ScandirReader:
    """Build the default reader for a config snapshot."""
    return ScandirReader(stat_strategy=config.stat_strategy, max_entries=config.max_dir_entries)
