"""Structured logging utilities."""

from .diagnostics import (
    LOG_LEVELS,
    DiagnosticEvent,
    DiagnosticLogger,
    sanitize_params,
    utc_timestamp,
)

__all__ = [
    "DiagnosticEvent",
    "DiagnosticLogger",
    "LOG_LEVELS",
    "sanitize_params",
    "utc_timestamp",
]
