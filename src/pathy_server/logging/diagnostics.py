"""Structured JSONL diagnostics written to a side-channel stream."""

from __future__ import annotations

import json
import sys
import threading
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import TextIO

LOG_LEVELS = ("debug", "info", "warning", "error")
_LEVEL_RANK = {name: rank for rank, name in enumerate(LOG_LEVELS)}


@dataclass(slots=True, frozen=True)
class DiagnosticEvent:
    """One structured log record."""

    timestamp: str
    level: str
    event: str
    message: str
    fields: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_params(params: dict[str, object]) -> dict[str, object]:
    """Reduce request params to shapes so document text never reaches the log."""
    sanitized: dict[str, object] = {}
    for key in sorted(params.keys()):
        value = params[key]
        if key in {"uri", "rootUri", "rootPath", "languageId"} and isinstance(value, str):
            sanitized[key] = value
            continue
        if key in {"line", "character", "version", "triggerKind"} and isinstance(value, int):
            sanitized[key] = value
            continue
        if isinstance(value, (int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, str):
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, list):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, dict):
            sanitized[key] = sanitize_params({str(k): v for k, v in value.items()})
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class DiagnosticLogger:
    """Write-only JSONL logger with a level threshold and once-only warnings."""

    def __init__(self, stream: TextIO | None = None, level: str = "warning") -> None:
        if level not in _LEVEL_RANK:
            raise ValueError(f"Unknown log level: {level}")
        self._stream = stream if stream is not None else sys.stderr
        self._threshold = _LEVEL_RANK[level]
        self._lock = threading.Lock()
        self._once_keys: set[str] = set()

    @property
    def level(self) -> str:
        """Return the active level threshold."""
        return LOG_LEVELS[self._threshold]

    def enabled_for(self, level: str) -> bool:
        """Return True when records at ``level`` are written."""
        return _LEVEL_RANK[level] >= self._threshold

    def debug(self, event: str, message: str, **fields: object) -> None:
        self.log("debug", event, message, **fields)

    def info(self, event: str, message: str, **fields: object) -> None:
        self.log("info", event, message, **fields)

    def warning(self, event: str, message: str, **fields: object) -> None:
        self.log("warning", event, message, **fields)

    def error(self, event: str, message: str, **fields: object) -> None:
        self.log("error", event, message, **fields)

    def warn_once(self, once_key: str, /, event: str, message: str, **fields: object) -> bool:
        """Log a warning the first time ``once_key`` is seen; return True if written."""
        with self._lock:
            if once_key in self._once_keys:
                return False
            self._once_keys.add(once_key)
        self.warning(event, message, **fields)
        return True

    def log(self, level: str, event: str, message: str, **fields: object) -> None:
        """Append one record as a JSON line when the level passes the threshold."""
        if not self.enabled_for(level):
            return
        record = DiagnosticEvent(
            timestamp=utc_timestamp(),
            level=level,
            event=event,
            message=message,
            fields={key: fields[key] for key in sorted(fields)},
        )
        line = json.dumps(asdict(record), sort_keys=True, default=str)
        with self._lock:
            self._stream.write(line)
            self._stream.write("\n")
            self._stream.flush()
