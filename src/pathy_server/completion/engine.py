"""Completion pipeline: scan, extract, gate, resolve, list and assemble."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from pathy_server.completion.assembler import InsertionStyle, Listing, assemble_candidates
from pathy_server.completion.models import CompletionCandidate, CompletionRequest, TextRange
from pathy_server.config import ConfigStore, PathyConfig
from pathy_server.documents import Document, DocumentStore, is_python_document, offset_at
from pathy_server.fs import (
    DirectoryCache,
    DirectoryReader,
    PathResolver,
    reader_for_config,
)
from pathy_server.gating import decide, prefix_rules
from pathy_server.gating.gate import CALL_WINDOW_CHARS
from pathy_server.logging import DiagnosticLogger
from pathy_server.scanner import (
    ScanResult,
    build_path_query,
    classify_path,
    scan_line,
    unescape_path_text,
)


class CompletionEngine:
    """Runs one completion request at a time against the latest snapshots."""

    def __init__(
        self,
        documents: DocumentStore,
        config_store: ConfigStore,
        cache: DirectoryCache | None = None,
        resolver: PathResolver | None = None,
        logger: DiagnosticLogger | None = None,
        workspace_root: Path | None = None,
        native_separator: str = os.sep,
        reader_factory: Callable[[PathyConfig], DirectoryReader] | None = None,
    ) -> None:
        self._documents = documents
        self._config_store = config_store
        self._resolver = resolver or PathResolver()
        self._logger = logger or DiagnosticLogger()
        self._workspace_root = workspace_root
        self._native_separator = native_separator
        config = config_store.current()
        if cache is None:
            self._reader_factory: Callable[[PathyConfig], DirectoryReader] | None = (
                reader_factory or reader_for_config
            )
            cache = DirectoryCache(
                reader=self._reader_factory(config),
                ttl_ms=config.cache_ttl_ms,
                max_dirs=config.cache_max_dirs,
                logger=self._logger,
            )
        else:
            self._reader_factory = reader_factory
        self._cache = cache

    @property
    def cache(self) -> DirectoryCache:
        """Return the shared directory cache."""
        return self._cache

    @property
    def workspace_root(self) -> Path | None:
        """Return the negotiated workspace root."""
        return self._workspace_root

    @workspace_root.setter
    def workspace_root(self, value: Path | None) -> None:
        self._workspace_root = value

    def apply_config(self, config: PathyConfig) -> None:
        """Swap in a new config snapshot and resize the cache to match."""
        self._config_store.replace(config)
        reader = self._reader_factory(config) if self._reader_factory is not None else None
        self._cache.reconfigure(
            ttl_ms=config.cache_ttl_ms, max_dirs=config.cache_max_dirs, reader=reader
        )

    def complete(self, request: CompletionRequest) -> list[CompletionCandidate]:
        """Return ordered candidates for ``request``; empty when nothing applies."""
        config = self._config_store.current()
        if not config.enable:
            return []
        document = self._documents.get(request.uri)
        if document is None or not is_python_document(document):
            return []
        line = document.line(request.line)
        if line is None:
            return []
        previous_line = document.line(request.line - 1) if request.line > 0 else None
        scan = scan_line(line, request.column, previous_line)
        if not scan.in_string:
            return []

        rules = prefix_rules(config)
        query = build_path_query(line, scan, request.column, rules)
        if query is None:
            return []
        # A placeholder in the directory part has no literal directory to list.
        if scan.has_placeholder_in(query.path_start, query.segment.start):
            return []
        preceding = _preceding_text(document, request.line, scan)
        decision = decide(preceding, query.path_text, config, manual=request.manual)
        if not decision.offer:
            return []

        kind = classify_path(query.path_text, rules)
        resolution = self._resolver.resolve(
            kind,
            unescape_path_text(query.dir_part, scan.is_raw),
            config,
            document_path=document.path,
            workspace_root=self._workspace_root,
        )
        if not resolution.targets:
            self._logger.debug(
                "resolution_failed",
                resolution.failure or "no listing target",
                uri=request.uri,
                kind=kind.value,
            )
            return []

        listings = [
            Listing(target=target, entries=self._cache.get_or_fetch(target.directory))
            for target in resolution.targets
        ]
        style = InsertionStyle(
            separator="/" if config.prefer_forward_slashes else self._native_separator,
            escape_backslashes=not scan.is_raw,
            quote_char=scan.quote_char,
            triple=scan.triple,
            leading_separator=query.needs_separator,
        )
        segment = query.segment
        return assemble_candidates(
            listings,
            segment.text,
            TextRange(line=request.line, start=segment.start, end=segment.end),
            config,
            style,
        )


def _preceding_text(document: Document, line_number: int, scan: ScanResult) -> str:
    """Return up to CALL_WINDOW_CHARS of document text before the literal's prefix."""
    if scan.prefix_start is None:
        return ""
    opening_line = line_number - 1 if scan.continued else line_number
    line_start = offset_at(document.text, opening_line, 0)
    if line_start is None:
        return ""
    end = line_start + scan.prefix_start
    return document.text[max(0, end - CALL_WINDOW_CHARS) : end]
