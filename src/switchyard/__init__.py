"""Switchyard — a first-match-wins path router.

Compiles slash-separated route templates into anchored matchers, keeps
them in one ordered bucket per HTTP method, and resolves a request path
and method to the controller that was registered for it.

Basic usage::

    from switchyard import Router

    router = Router()
    router.get("/articles/:id", "articles.show", defaults={"format": "html"})
    router.post("/articles", "articles.create")

    match = router.resolve("/articles/7", "GET")
    match.controller  # "articles.show"
    match.variables   # {"format": "html", "id": "7"}

Snapshots for warm starts::

    data = router.serialize()
    restored = Router().unserialize(data)
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ControllerRegistry",
    "HTTPError",
    "InvalidMethodError",
    "MethodNotAllowedError",
    "MissingFieldError",
    "PatternError",
    "ResolvedRoute",
    "RouteNotFoundError",
    "Router",
    "RouterConfig",
    "Rule",
    "SerializationError",
    "SwitchyardError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from switchyard.routing.router import Router

        return Router

    if name == "RouterConfig":
        from switchyard.config import RouterConfig

        return RouterConfig

    if name in ("ResolvedRoute", "Rule"):
        from switchyard.routing import route as _route

        return getattr(_route, name)

    if name == "ControllerRegistry":
        from switchyard.persistence.controllers import ControllerRegistry

        return ControllerRegistry

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidMethodError",
        "MethodNotAllowedError",
        "MissingFieldError",
        "PatternError",
        "RouteNotFoundError",
        "SerializationError",
        "SwitchyardError",
    ):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
