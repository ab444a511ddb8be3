"""RouteTable — ordered rule buckets, one per HTTP method."""

from collections.abc import Iterator

from switchyard.routing.route import HTTP_METHODS, Rule


class RouteTable:
    """Mapping of method token to an ordered list of rules.

    The eight known method buckets always exist, even when empty.
    Insertion order within a bucket is the resolution order. Buckets
    for other tokens are created on demand by ``append()``; they are
    stored and persisted but never resolved directly.
    """

    __slots__ = ("_buckets",)

    def __init__(self) -> None:
        self._buckets: dict[str, list[Rule]] = {method: [] for method in HTTP_METHODS}

    def append(self, method: str, rule: Rule) -> None:
        """Append *rule* to the bucket for *method* (upper-cased)."""
        self._buckets.setdefault(method.upper(), []).append(rule)

    def append_all(self, rule: Rule) -> None:
        """Append the same *rule* object to every known method bucket."""
        for method in HTTP_METHODS:
            self._buckets[method].append(rule)

    def bucket(self, method: str) -> tuple[Rule, ...]:
        """Return the rules registered under *method*, in order."""
        return tuple(self._buckets.get(method.upper(), ()))

    def methods(self) -> tuple[str, ...]:
        return tuple(self._buckets)

    def items(self) -> Iterator[tuple[str, tuple[Rule, ...]]]:
        for method, rules in self._buckets.items():
            yield method, tuple(rules)

    def rules(self) -> list[Rule]:
        """Return every distinct rule, in first-seen table order."""
        seen: set[int] = set()
        result: list[Rule] = []
        for rules in self._buckets.values():
            for rule in rules:
                if id(rule) not in seen:
                    seen.add(id(rule))
                    result.append(rule)
        return result

    def replace(self, other: "RouteTable") -> None:
        """Take over every bucket of *other*, discarding the current rules."""
        self._buckets = {method: list(rules) for method, rules in other.items()}
        for method in HTTP_METHODS:
            self._buckets.setdefault(method, [])

    def __len__(self) -> int:
        return len(self.rules())

    def __repr__(self) -> str:
        sizes = ", ".join(f"{method}={len(rules)}" for method, rules in self._buckets.items())
        return f"<RouteTable {sizes}>"
