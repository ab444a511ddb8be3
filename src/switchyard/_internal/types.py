"""Shared type aliases used across switchyard modules."""

from collections.abc import Mapping
from typing import Any, TypeAlias

# Controller — opaque caller value: an identifier, a handler, or any callable
Controller: TypeAlias = Any

# Per-variable regex overrides keyed by variable name
Rules: TypeAlias = Mapping[str, str]

# Fallback variable values applied before captures
Defaults: TypeAlias = Mapping[str, Any]

# One entry of a bulk registration: pattern, controller, method, rules, defaults
RouteMap: TypeAlias = Mapping[str, Any]
