"""Switchyard CLI — inspect, exercise, and snapshot a router.

Entry point registered as ``switchyard`` in ``pyproject.toml``::

    [project.scripts]
    switchyard = "switchyard.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchyard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchyard",
        description="Switchyard — a first-match-wins path router.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchyard routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.urls:router)",
    )

    # -- switchyard match --------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Resolve a method and path")
    match_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.urls:router)",
    )
    match_parser.add_argument("method", help="HTTP method (e.g. GET)")
    match_parser.add_argument("path", help="Request path or URL")

    # -- switchyard dump ---------------------------------------------------
    dump_parser = subparsers.add_parser("dump", help="Write a route table snapshot")
    dump_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.urls:router)",
    )
    dump_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Snapshot file (default: stdout)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from switchyard.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from switchyard.cli._match import run_match

        run_match(args)
    elif args.command == "dump":
        from switchyard.cli._dump import run_dump

        run_dump(args)
