"""Bounded time-to-live cache of directory listings."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pathy_server.fs.reader import DirectoryReader, DirEntry, ScandirReader
from pathy_server.logging import DiagnosticLogger


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """One listing snapshot; replaced as a whole, never edited."""

    directory: str
    entries: tuple[DirEntry, ...]
    fetched_at: float
    failed: bool = False


class DirectoryCache:
    """Read-through listing cache keyed by absolute directory path.

    Entries live for ``ttl_ms`` and at most ``max_dirs`` are kept; when full,
    the least recently fetched entry is evicted. Failed reads are cached as
    empty listings so they are retried only after the TTL.
    """

    def __init__(
        self,
        reader: DirectoryReader | None = None,
        ttl_ms: int = 500,
        max_dirs: int = 64,
        clock: Callable[[], float] = time.monotonic,
        logger: DiagnosticLogger | None = None,
    ) -> None:
        self._reader: DirectoryReader = reader or ScandirReader()
        self._ttl_seconds = ttl_ms / 1000.0
        self._max_dirs = max(1, max_dirs)
        self._clock = clock
        self._logger = logger
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, directory: object) -> bool:
        with self._lock:
            return str(directory) in self._entries

    def directories(self) -> tuple[str, ...]:
        """Return cached directory keys, least recently fetched first."""
        with self._lock:
            return tuple(self._entries.keys())

    def lookup(self, directory: Path) -> CacheEntry | None:
        """Return a fresh entry for ``directory`` without touching the filesystem."""
        key = str(directory)
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not self._is_fresh(entry):
            return None
        return entry

    def get_or_fetch(self, directory: Path) -> tuple[DirEntry, ...]:
        """Return the listing for ``directory``, reading it on a miss or expiry."""
        cached = self.lookup(directory)
        if cached is not None:
            return cached.entries
        key = str(directory)
        try:
            entries = tuple(self._reader.read_dir(directory))
            failed = False
        except OSError as error:
            entries = ()
            failed = True
            if self._logger is not None:
                self._logger.warn_once(
                    f"fs:{key}",
                    "directory_read_failed",
                    "Directory could not be listed; caching an empty listing.",
                    path=key,
                    error=type(error).__name__,
                )
        self._store(
            CacheEntry(directory=key, entries=entries, fetched_at=self._clock(), failed=failed)
        )
        return entries

    def reconfigure(
        self, ttl_ms: int, max_dirs: int, reader: DirectoryReader | None = None
    ) -> None:
        """Apply new limits; a different reader invalidates every entry."""
        with self._lock:
            self._ttl_seconds = ttl_ms / 1000.0
            self._max_dirs = max(1, max_dirs)
            if reader is not None and reader != self._reader:
                self._reader = reader
                self._entries.clear()
            while len(self._entries) > self._max_dirs:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop every cached listing."""
        with self._lock:
            self._entries.clear()

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl_seconds

    def _store(self, entry: CacheEntry) -> None:
        with self._lock:
            self._entries.pop(entry.directory, None)
            while len(self._entries) >= self._max_dirs:
                self._entries.popitem(last=False)
            self._entries[entry.directory] = entry
