"""Tests for switchyard.routing.route — Rule and ResolvedRoute."""

from types import MappingProxyType

import pytest

from switchyard.routing.pattern import compile_pattern
from switchyard.routing.route import HTTP_METHODS, ResolvedRoute, Rule


def _rule(pattern: str, controller: object = "ctl", defaults: dict[str, str] | None = None) -> Rule:
    compiled = compile_pattern(pattern)
    return Rule(
        pattern=pattern,
        regex=compiled.regex,
        variables=compiled.variables,
        groups=compiled.groups,
        controller=controller,
        defaults=MappingProxyType(defaults or {}),
    )


class TestHTTPMethods:
    def test_eight_methods_in_table_order(self) -> None:
        assert HTTP_METHODS == ("GET", "PUT", "POST", "DELETE", "HEAD", "OPTIONS", "TRACE", "PATCH")


class TestRule:
    def test_match_returns_variables(self) -> None:
        rule = _rule("/users/:id")
        assert rule.match("users/42") == {"id": "42"}

    def test_no_match_returns_none(self) -> None:
        rule = _rule("/users/:id")
        assert rule.match("posts/42") is None

    def test_defaults_applied(self) -> None:
        rule = _rule("/item", defaults={"format": "json"})
        assert rule.match("item") == {"format": "json"}

    def test_captures_override_defaults(self) -> None:
        rule = _rule("/item/:id", defaults={"id": "0"})
        assert rule.match("item/7") == {"id": "7"}

    def test_match_does_not_mutate_defaults(self) -> None:
        rule = _rule("/item/:id", defaults={"id": "0"})
        rule.match("item/7")
        assert rule.defaults["id"] == "0"

    def test_identity_equality(self) -> None:
        assert _rule("/a") != _rule("/a")

    def test_frozen(self) -> None:
        rule = _rule("/a")
        with pytest.raises(AttributeError):
            rule.controller = "other"  # type: ignore[misc]

    def test_defaults_read_only(self) -> None:
        rule = _rule("/a", defaults={"x": "1"})
        with pytest.raises(TypeError):
            rule.defaults["x"] = "2"  # type: ignore[index]

    def test_repr(self) -> None:
        assert repr(_rule("/a", "home")) == "<Rule '/a' -> 'home'>"


class TestResolvedRoute:
    def test_creation(self) -> None:
        resolved = ResolvedRoute(controller="users.show", variables={"id": "42"})
        assert resolved.controller == "users.show"
        assert resolved.variables == {"id": "42"}

    def test_frozen(self) -> None:
        resolved = ResolvedRoute(controller="c", variables={})
        with pytest.raises(AttributeError):
            resolved.controller = "d"  # type: ignore[misc]
