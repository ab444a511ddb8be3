"""Router — registration API and first-match-wins resolution.

Rules are registered during setup, then resolved read-only for every
request. Registration order is the only tie-break: when several rules
under one method match a path, the earliest one wins.
"""

import logging
from collections.abc import Iterable
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from switchyard._internal.types import Controller, Defaults, RouteMap, Rules
from switchyard.config import RouterConfig
from switchyard.errors import (
    InvalidMethodError,
    MethodNotAllowedError,
    MissingFieldError,
    RouteNotFoundError,
)
from switchyard.routing.pattern import compile_pattern, normalize_path
from switchyard.routing.route import HTTP_METHODS, ResolvedRoute, Rule
from switchyard.routing.table import RouteTable

if TYPE_CHECKING:
    from switchyard.persistence.controllers import ControllerRegistry

logger = logging.getLogger("switchyard.routing")


class Router:
    """A path router over eight ordered method buckets.

    Usage::

        router = Router()
        router.get("/users/:id", "users.show", rules={"id": r"\\d+"})
        router.all("/ping", ping)
        match = router.resolve("/users/42", "GET")
        match.controller, match.variables  # ("users.show", {"id": "42"})
    """

    __slots__ = ("_table", "config")

    def __init__(
        self,
        maps: Iterable[RouteMap] | None = None,
        *,
        config: RouterConfig | None = None,
    ) -> None:
        self.config = config or RouterConfig()
        self._table = RouteTable()
        if maps:
            self.add_routes(maps)

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def routes(self) -> list[tuple[str, Rule]]:
        """Return every ``(method, rule)`` pair in resolution order."""
        return [(method, rule) for method, rules in self._table.items() for rule in rules]

    # -- Registration -------------------------------------------------------

    def _build_rule(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None,
        defaults: Defaults | None,
    ) -> Rule:
        compiled = compile_pattern(pattern, rules, self.config.strip_chars)
        return Rule(
            pattern=pattern,
            regex=compiled.regex,
            variables=compiled.variables,
            groups=compiled.groups,
            controller=controller,
            defaults=MappingProxyType(dict(defaults or {})),
        )

    def add_route(
        self,
        method: str,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        """Compile *pattern* and append it to the bucket for *method*.

        The method is upper-cased but not validated; unknown tokens are
        rejected by ``resolve()``. Re-adding a pattern appends a second
        rule rather than replacing the first.
        """
        rule = self._build_rule(pattern, controller, rules, defaults)
        self._table.append(method, rule)
        logger.debug("Registered %s %s -> %r", method.upper(), pattern, controller)
        return self

    def add_routes(self, maps: Iterable[RouteMap]) -> "Router":
        """Register a batch of route maps.

        Each map needs ``pattern`` and ``controller``; ``method`` defaults
        to ``config.default_method`` and ``rules``/``defaults`` to empty.
        The batch is all-or-nothing: every entry is validated and compiled
        before any is appended, so a ``MissingFieldError`` or
        ``PatternError`` leaves the table unchanged.
        """
        pending: list[tuple[str, Rule]] = []
        for index, entry in enumerate(maps):
            for required in ("pattern", "controller"):
                if required not in entry:
                    raise MissingFieldError(required, index)
            rule = self._build_rule(
                entry["pattern"],
                entry["controller"],
                entry.get("rules"),
                entry.get("defaults"),
            )
            pending.append((entry.get("method", self.config.default_method), rule))

        for method, rule in pending:
            self._table.append(method, rule)
        logger.debug("Registered batch of %d routes", len(pending))
        return self

    def get(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        return self.add_route("GET", pattern, controller, rules, defaults)

    def post(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        return self.add_route("POST", pattern, controller, rules, defaults)

    def put(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        return self.add_route("PUT", pattern, controller, rules, defaults)

    def delete(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        return self.add_route("DELETE", pattern, controller, rules, defaults)

    def head(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        return self.add_route("HEAD", pattern, controller, rules, defaults)

    def options(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        return self.add_route("OPTIONS", pattern, controller, rules, defaults)

    def trace(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        return self.add_route("TRACE", pattern, controller, rules, defaults)

    def patch(
        self,
        pattern: str,
        controller: Controller,
        rules: Rules | None = None,
        defaults: Defaults | None = None,
    ) -> "Router":
        return self.add_route("PATCH", pattern, controller, rules, defaults)

    def all(self, pattern: str, controller: Controller, rules: Rules | None = None) -> "Router":
        """Register one catch-all rule under every known method.

        The pattern is compiled once and the same rule object is appended
        to all eight buckets. Defaults are not accepted here.
        """
        rule = self._build_rule(pattern, controller, rules, None)
        self._table.append_all(rule)
        logger.debug("Registered %s for all methods -> %r", pattern, controller)
        return self

    # -- Resolution ---------------------------------------------------------

    def resolve(self, path: str, method: str | None = None) -> ResolvedRoute:
        """Resolve a request path and method to a controller.

        Returns a ``ResolvedRoute`` on success.
        Raises ``InvalidMethodError`` if *method* is not a known token.
        Raises ``MethodNotAllowedError`` if the path matches only under
        other methods.
        Raises ``RouteNotFoundError`` if no rule matches the path at all.
        """
        method = (method or self.config.default_method).upper()
        if method not in HTTP_METHODS:
            raise InvalidMethodError(method)

        route = normalize_path(path, self.config.strip_chars)

        for rule in self._table.bucket(method):
            variables = rule.match(route)
            if variables is not None:
                if self.config.log_resolutions:
                    logger.debug("Resolved %s %s -> %r", method, route, rule.controller)
                return ResolvedRoute(controller=rule.controller, variables=variables)

        allowed = self._allowed_methods(route, method)
        if allowed:
            logger.debug("405 %s %s (allowed: %s)", method, route, ", ".join(allowed))
            detail = f"Route `{route}` does not support `{method}` requests."
            raise MethodNotAllowedError(allowed, path, method, detail)

        logger.debug("404 %s %s", method, route)
        raise RouteNotFoundError(path, f"Unable to handle request for route `{route}`.")

    # Name used by earlier releases
    parse_route = resolve

    def _allowed_methods(self, route: str, method: str) -> tuple[str, ...]:
        """Return every other method with at least one rule matching *route*."""
        allowed: list[str] = []
        for known in self._table.methods():
            if known == method:
                continue
            if any(rule.regex.fullmatch(route) for rule in self._table.bucket(known)):
                allowed.append(known)
        return tuple(allowed)

    # -- Persistence --------------------------------------------------------

    def serialize(self, registry: "ControllerRegistry | None" = None) -> str:
        """Return the whole rule table as a JSON document.

        *registry* is an optional ``ControllerRegistry`` whose names are
        stored in place of the controllers it knows.
        """
        from switchyard.persistence.codec import dumps

        return dumps(self._table, registry)

    def unserialize(self, data: str | bytes, registry: "ControllerRegistry | None" = None) -> "Router":
        """Replace the whole rule table with one restored from *data*."""
        from switchyard.persistence.codec import loads

        self._table.replace(loads(data, registry))
        return self

    def __getstate__(self) -> dict[str, Any]:
        return {"config": self.config, "table": self.serialize()}

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.config = state["config"]
        self._table = RouteTable()
        self.unserialize(state["table"])

    def __repr__(self) -> str:
        return f"<Router {len(self._table)} rules>"
