"""Method registry and built-in handlers."""

from .builtin import register_builtin_handlers
from .registry import MethodDispatchError, MethodHandler, MethodRegistry, MethodSpec

__all__ = [
    "MethodDispatchError",
    "MethodHandler",
    "MethodRegistry",
    "MethodSpec",
    "register_builtin_handlers",
]
