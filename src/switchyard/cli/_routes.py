"""``switchyard routes`` — list registered routes.

Prints every rule in resolution order with method, pattern, and
controller.
"""

import argparse

from switchyard.cli._resolve import load_router


def describe_controller(controller: object) -> str:
    """Short human-readable name for a controller."""
    if isinstance(controller, str):
        return controller
    name = getattr(controller, "__qualname__", None) or getattr(controller, "__name__", None)
    return name if isinstance(name, str) else repr(controller)


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a router.

    Resolves ``args.router`` to a Router instance and prints a table of
    METHOD, PATTERN, and controller name.
    """
    router = load_router(args)

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    # Build rows: (method, pattern, controller_name)
    rows = [(method, rule.pattern, describe_controller(rule.controller)) for method, rule in routes]

    # Column widths
    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_pattern = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

    fmt = f"{{:<{max_method}}}  {{:<{max_pattern}}}  {{}}"
    print(fmt.format("METHOD", "PATTERN", "CONTROLLER"))
    sep_len = max_method + max_pattern + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, pattern, controller_name in rows:
        print(fmt.format(method, pattern, controller_name))
