"""Method table for the JSON-lines transport."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

MethodHandler = Callable[[dict[str, object]], object]


@dataclass(slots=True, frozen=True)
class MethodDispatchError(Exception):
    """Represents deterministic method dispatch failures."""

    code: str
    message: str


@dataclass(slots=True, frozen=True)
class MethodSpec:
    """A registered handler; notifications never produce a response."""

    name: str
    handler: MethodHandler
    notification: bool = False


@dataclass(slots=True)
class MethodRegistry:
    """Method table keyed by protocol method name, in registration order."""

    _methods: dict[str, MethodSpec] = field(default_factory=dict)

    def register(self, name: str, handler: MethodHandler, notification: bool = False) -> None:
        """Register ``handler`` for ``name``, replacing any earlier one."""
        self._methods[name] = MethodSpec(name=name, handler=handler, notification=notification)

    def get(self, name: str) -> MethodSpec | None:
        return self._methods.get(name)

    def names(self) -> tuple[str, ...]:
        """Return registered method names in registration order."""
        return tuple(self._methods.keys())

    def notifications(self) -> tuple[str, ...]:
        """Return the names registered as notifications."""
        return tuple(name for name, spec in self._methods.items() if spec.notification)

    def dispatch(
        self, name: str, params: dict[str, object], expects_response: bool = True
    ) -> object:
        """Run the handler for ``name``; notifications reject a request id."""
        spec = self.get(name)
        if spec is None:
            raise MethodDispatchError(code="METHOD_NOT_FOUND", message=f"Unknown method: {name}")
        if spec.notification and expects_response:
            raise MethodDispatchError(
                code="INVALID_REQUEST", message=f"{name} is a notification and takes no id."
            )
        return spec.handler(params)
