"""Route table codec — JSON snapshots of every method bucket.

Document shape (format 1)::

    {
      "format": 1,
      "rules": [
        {"pattern": "/users/:id", "regex": "^users/([^/]*)$",
         "variables": ["id"], "groups": [1],
         "controller": {"kind": "data", "value": "users.show"},
         "defaults": {}}
      ],
      "methods": {"GET": [0], "PUT": [], ...}
    }

Each distinct rule is stored once; buckets hold indices into ``rules``,
so a rule shared across methods is restored as one shared object.
"""

import json
import logging
import re
from types import MappingProxyType
from typing import Any

from switchyard.errors import SerializationError
from switchyard.persistence.controllers import ControllerRegistry, decode_controller, encode_controller
from switchyard.routing.route import Rule
from switchyard.routing.table import RouteTable

logger = logging.getLogger("switchyard.persistence")

FORMAT_VERSION = 1


def dumps(table: RouteTable, registry: ControllerRegistry | None = None) -> str:
    """Serialize *table* to a JSON string.

    Raises ``SerializationError`` if a controller or default value has
    no portable encoding.
    """
    rules = table.rules()
    index = {id(rule): i for i, rule in enumerate(rules)}
    doc = {
        "format": FORMAT_VERSION,
        "rules": [_encode_rule(rule, registry) for rule in rules],
        "methods": {method: [index[id(rule)] for rule in bucket] for method, bucket in table.items()},
    }
    logger.debug("Serialized %d rules", len(rules))
    return json.dumps(doc)


def loads(data: str | bytes, registry: ControllerRegistry | None = None) -> RouteTable:
    """Restore a ``RouteTable`` from a ``dumps()`` document.

    Raises ``SerializationError`` for malformed documents, unsupported
    format versions, or controllers that cannot be rebuilt.
    """
    try:
        doc = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"Route table snapshot is not valid JSON: {exc}"
        raise SerializationError(msg) from exc

    if not isinstance(doc, dict) or doc.get("format") != FORMAT_VERSION:
        msg = f"Unsupported route table snapshot (expected format {FORMAT_VERSION})"
        raise SerializationError(msg)

    try:
        rules = [_decode_rule(entry, registry) for entry in doc["rules"]]
        table = RouteTable()
        for method, indices in doc["methods"].items():
            for i in indices:
                table.append(method, rules[i])
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        msg = f"Malformed route table snapshot: {exc!r}"
        raise SerializationError(msg) from exc

    logger.debug("Restored %d rules", len(rules))
    return table


def _encode_rule(rule: Rule, registry: ControllerRegistry | None) -> dict[str, Any]:
    defaults = {}
    for name, value in rule.defaults.items():
        if not isinstance(name, str):
            msg = f"Default names must be strings, got {name!r} in {rule.pattern!r}"
            raise SerializationError(msg)
        defaults[name] = encode_controller(value, registry)

    return {
        "pattern": rule.pattern,
        "regex": rule.regex.pattern,
        "variables": list(rule.variables),
        "groups": list(rule.groups),
        "controller": encode_controller(rule.controller, registry),
        "defaults": defaults,
    }


def _decode_rule(entry: dict[str, Any], registry: ControllerRegistry | None) -> Rule:
    try:
        regex = re.compile(entry["regex"])
    except re.error as exc:
        msg = f"Snapshot rule {entry.get('pattern')!r} has an invalid regex: {exc}"
        raise SerializationError(msg) from exc

    variables = tuple(entry["variables"])
    groups = tuple(entry["groups"])
    if len(variables) != len(groups):
        msg = f"Snapshot rule {entry.get('pattern')!r} has mismatched variables and groups"
        raise SerializationError(msg)

    return Rule(
        pattern=entry["pattern"],
        regex=regex,
        variables=variables,
        groups=groups,
        controller=decode_controller(entry["controller"], registry),
        defaults=MappingProxyType(
            {name: decode_controller(value, registry) for name, value in entry["defaults"].items()}
        ),
    )
