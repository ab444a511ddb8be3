"""``switchyard match`` — resolve one request against a router."""

import argparse
import sys

from switchyard.cli._resolve import load_router
from switchyard.cli._routes import describe_controller
from switchyard.errors import HTTPError, InvalidMethodError


def run_match(args: argparse.Namespace) -> None:
    """Resolve ``args.method`` and ``args.path`` and print the result.

    Exits with status 1 when the router answers 404 or 405, or when the
    method is not a known token.
    """
    router = load_router(args)

    try:
        resolved = router.resolve(args.path, args.method)
    except (HTTPError, InvalidMethodError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        for name, value in getattr(exc, "headers", ()):
            print(f"{name}: {value}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"controller: {describe_controller(resolved.controller)}")
    for name, value in resolved.variables.items():
        print(f"  {name} = {value!r}")
