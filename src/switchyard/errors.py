"""Switchyard exception hierarchy.

Shared across the compiler, router, persistence codec, and CLI so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when a route registration is invalid.

    Always surfaced at registration time, before any request is resolved.
    """


class PatternError(ConfigurationError):
    """A route pattern or one of its override regexes failed to compile."""

    def __init__(self, pattern: str, message: str, variable: str | None = None) -> None:
        self.pattern = pattern
        self.variable = variable
        super().__init__(message)


class MissingFieldError(ConfigurationError):
    """A bulk route map is missing its ``pattern`` or ``controller`` key."""

    def __init__(self, field: str, index: int) -> None:
        self.field = field
        self.index = index
        super().__init__(f"Route map #{index} must contain a {field!r} key.")


class InvalidMethodError(SwitchyardError, ValueError):
    """``resolve()`` was called with a method outside the known tokens."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"{method} is not a valid HTTP method.")


class SerializationError(SwitchyardError):
    """A route table could not be encoded or a persisted document is invalid."""


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Raised by the resolver. The embedding server catches these and builds
    the protocol-level response from ``status``, ``detail`` and ``headers``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class RouteNotFoundError(HTTPError):
    """404 — no rule under any method matched the request path.

    ``path`` is the request path exactly as the caller passed it.
    """

    path: str

    def __init__(self, path: str, detail: str = "") -> None:
        super().__init__(
            status=404,
            detail=detail or f"Unable to handle request for route `{path}`.",
        )
        object.__setattr__(self, "path", path)


class MethodNotAllowedError(HTTPError):
    """405 — the path matches, but only under other methods.

    ``allowed`` keeps the order the methods were discovered in and feeds
    the ``Allow`` header. ``path`` is the request path as received.
    """

    allowed: tuple[str, ...]
    path: str
    method: str

    def __init__(self, allowed: tuple[str, ...], path: str, method: str, detail: str = "") -> None:
        allow_value = ", ".join(allowed)
        super().__init__(
            status=405,
            detail=detail or f"Route `{path}` does not support `{method}` requests.",
            headers=(("Allow", allow_value),),
        )
        object.__setattr__(self, "allowed", tuple(allowed))
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "method", method)
