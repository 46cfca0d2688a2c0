"""Completion assembly and the end-to-end pipeline."""

from .assembler import (
    InsertionStyle,
    Listing,
    assemble_candidates,
    format_insert_text,
    should_ignore,
)
from .engine import CompletionEngine
from .models import CompletionCandidate, CompletionRequest, TextRange

__all__ = [
    "CompletionCandidate",
    "CompletionEngine",
    "CompletionRequest",
    "InsertionStyle",
    "Listing",
    "TextRange",
    "assemble_candidates",
    "format_insert_text",
    "should_ignore",
]
