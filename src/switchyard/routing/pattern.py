"""Pattern compiler — route templates to anchored regular expressions.

The mini-language works one ``/``-separated segment at a time::

    "*"        any run of characters, ``/`` included, not captured
    "*rest"    same, captured as ``rest``
    ":"        one segment (no ``/``), captured but unnamed
    ":id"      one segment, or ``rules["id"]`` when given, captured as ``id``
    "\\*x"     literal ``*x``
    "\\:x"     literal ``:x``
    "users"    literal segment
"""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from switchyard._internal.types import Rules
from switchyard.errors import PatternError

# Default group bodies
SEGMENT = r"[^/]*"
SPLAT = r".*"


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """Result of compiling a pattern.

    ``groups[i]`` is the regex group number holding ``variables[i]``.
    """

    regex: re.Pattern[str]
    variables: tuple[str, ...]
    groups: tuple[int, ...]


def normalize_path(value: str, strip: str = " /") -> str:
    """Return the URL path component of *value* without surrounding slashes.

    Accepts bare paths as well as full URLs; query strings and fragments
    are dropped::

        "/users/42/"                      -> "users/42"
        "http://example.com/a/b?page=2"   -> "a/b"
    """
    return urlsplit(value).path.strip(strip)


def compile_pattern(pattern: str, rules: Rules | None = None, strip: str = " /") -> CompiledPattern:
    """Compile *pattern* into a whole-path matcher and its variable names.

    Override regexes in *rules* are used verbatim as the group body of the
    matching ``:name`` segment. Raises ``PatternError`` if an override or
    the assembled expression does not compile.
    """
    rules = rules or {}
    fragments: list[str] = []
    variables: list[str] = []
    groups: list[int] = []
    # Number of capturing groups emitted so far
    group_count = 0

    for segment in normalize_path(pattern, strip).split("/"):
        if segment == "*":
            fragments.append(SPLAT)
        elif segment.startswith("*"):
            group_count += 1
            variables.append(segment[1:])
            groups.append(group_count)
            fragments.append(f"({SPLAT})")
        elif segment.startswith("\\*"):
            fragments.append(r"\*" + re.escape(segment[2:]))
        elif segment == ":":
            group_count += 1
            fragments.append(f"({SEGMENT})")
        elif segment.startswith(":"):
            name = segment[1:]
            group_count += 1
            variables.append(name)
            groups.append(group_count)
            if name in rules:
                body = rules[name]
                group_count += _count_groups(pattern, name, body)
            else:
                body = SEGMENT
            fragments.append(f"({body})")
        elif segment.startswith("\\:"):
            fragments.append(re.escape(segment[1:]))
        else:
            fragments.append(re.escape(segment))

    source = "^" + "/".join(fragments) + "$"
    try:
        regex = re.compile(source)
    except re.error as exc:
        msg = f"Pattern {pattern!r} compiled to an invalid expression {source!r}: {exc}"
        raise PatternError(pattern, msg) from exc

    return CompiledPattern(regex=regex, variables=tuple(variables), groups=tuple(groups))


def _count_groups(pattern: str, name: str, body: str) -> int:
    """Validate an override regex and return how many groups it opens."""
    try:
        return re.compile(body).groups
    except re.error as exc:
        msg = f"Invalid regex {body!r} for variable {name!r} in pattern {pattern!r}: {exc}"
        raise PatternError(pattern, msg, variable=name) from exc
