"""Tests for switchyard.routing.table — per-method rule buckets."""

from switchyard.routing.pattern import compile_pattern
from switchyard.routing.route import HTTP_METHODS, Rule
from switchyard.routing.table import RouteTable


def _rule(pattern: str) -> Rule:
    compiled = compile_pattern(pattern)
    return Rule(
        pattern=pattern,
        regex=compiled.regex,
        variables=compiled.variables,
        groups=compiled.groups,
        controller=pattern,
    )


class TestBuckets:
    def test_all_buckets_present_when_empty(self) -> None:
        table = RouteTable()
        assert table.methods() == HTTP_METHODS
        for method in HTTP_METHODS:
            assert table.bucket(method) == ()

    def test_append_preserves_order(self) -> None:
        table = RouteTable()
        first, second = _rule("/a"), _rule("/b")
        table.append("GET", first)
        table.append("GET", second)
        assert table.bucket("GET") == (first, second)

    def test_append_upper_cases_method(self) -> None:
        table = RouteTable()
        rule = _rule("/a")
        table.append("post", rule)
        assert table.bucket("POST") == (rule,)

    def test_duplicates_kept(self) -> None:
        table = RouteTable()
        table.append("GET", _rule("/a"))
        table.append("GET", _rule("/a"))
        assert len(table.bucket("GET")) == 2

    def test_unknown_method_gets_own_bucket(self) -> None:
        table = RouteTable()
        rule = _rule("/a")
        table.append("PURGE", rule)
        assert table.bucket("PURGE") == (rule,)
        assert "PURGE" in table.methods()


class TestAppendAll:
    def test_same_rule_in_every_bucket(self) -> None:
        table = RouteTable()
        rule = _rule("/ping")
        table.append_all(rule)
        for method in HTTP_METHODS:
            assert table.bucket(method)[0] is rule

    def test_same_relative_position(self) -> None:
        table = RouteTable()
        table.append("GET", _rule("/a"))
        shared = _rule("/ping")
        table.append_all(shared)
        assert table.bucket("GET")[1] is shared
        assert table.bucket("POST")[0] is shared

    def test_skips_extra_buckets(self) -> None:
        table = RouteTable()
        table.append("PURGE", _rule("/a"))
        table.append_all(_rule("/ping"))
        assert len(table.bucket("PURGE")) == 1


class TestIntrospection:
    def test_rules_distinct(self) -> None:
        table = RouteTable()
        shared = _rule("/ping")
        only_get = _rule("/a")
        table.append("GET", only_get)
        table.append_all(shared)
        assert table.rules() == [only_get, shared]
        assert len(table) == 2

    def test_replace(self) -> None:
        table = RouteTable()
        table.append("GET", _rule("/old"))
        other = RouteTable()
        new = _rule("/new")
        other.append("POST", new)

        table.replace(other)

        assert table.bucket("GET") == ()
        assert table.bucket("POST") == (new,)
        assert table.methods()[: len(HTTP_METHODS)] == HTTP_METHODS

    def test_repr(self) -> None:
        table = RouteTable()
        table.append("GET", _rule("/a"))
        assert "GET=1" in repr(table)
