"""Path completion engine for Python string literals."""

__version__ = "0.1.0"
