"""Rule and ResolvedRoute frozen dataclasses."""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from switchyard._internal.types import Controller

# Known method tokens, in table order
HTTP_METHODS: tuple[str, ...] = ("GET", "PUT", "POST", "DELETE", "HEAD", "OPTIONS", "TRACE", "PATCH")


@dataclass(frozen=True, slots=True, eq=False)
class Rule:
    """One compiled route registration.

    Compared by identity: registering the same pattern twice yields two
    distinct rules, and the one shared by ``Router.all()`` is the same
    object in every bucket.
    """

    pattern: str
    regex: re.Pattern[str]
    variables: tuple[str, ...]
    groups: tuple[int, ...]
    controller: Controller
    defaults: MappingProxyType[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def match(self, path: str) -> dict[str, Any] | None:
        """Match a normalized path, returning the variable mapping or ``None``.

        Defaults are applied first and captures second, so a captured value
        always replaces a default of the same name.
        """
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        variables = dict(self.defaults)
        for name, group in zip(self.variables, self.groups, strict=True):
            variables[name] = m.group(group)
        return variables

    def __repr__(self) -> str:
        return f"<Rule {self.pattern!r} -> {self.controller!r}>"


@dataclass(frozen=True, slots=True)
class ResolvedRoute:
    """Result of a successful resolution."""

    controller: Controller
    variables: dict[str, Any]
