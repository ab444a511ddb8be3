"""Locate the Router a subcommand operates on.

``APP`` arguments name a module and, after a colon, a dotted attribute
path inside it (``myapp.urls:router``, ``myapp:api.router``). The
attribute defaults to ``router``. It may hold a Router or a zero-argument
factory that builds one.
"""

import argparse
import sys

from switchyard._internal.imports import import_object
from switchyard.routing.router import Router

DEFAULT_ATTRIBUTE = "router"


def resolve_router(import_string: str) -> Router:
    """Return the Router named by *import_string*, building it if needed.

    Raises ``ImportError``/``AttributeError`` when the target is missing,
    and ``TypeError`` when it neither is nor builds a Router.
    """
    module_path, _, attr_path = import_string.partition(":")
    target = import_object(module_path, attr_path or DEFAULT_ATTRIBUTE)

    if isinstance(target, Router):
        return target
    if not callable(target):
        msg = f"{import_string!r} is a {type(target).__name__}, expected a Router or a factory"
        raise TypeError(msg)

    built = target()
    if not isinstance(built, Router):
        msg = f"Factory {import_string!r} returned {type(built).__name__}, expected a Router"
        raise TypeError(msg)
    return built


def load_router(args: argparse.Namespace) -> Router:
    """Resolve ``args.router`` or exit with status 1 and the error on stderr."""
    try:
        return resolve_router(args.router)
    except (ImportError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
