"""``switchyard dump`` — write a route table snapshot."""

import argparse
import sys
from pathlib import Path

from switchyard.cli._resolve import load_router
from switchyard.errors import SerializationError


def run_dump(args: argparse.Namespace) -> None:
    """Serialize ``args.router`` to ``args.output``, or stdout when omitted."""
    router = load_router(args)

    try:
        data = router.serialize()
    except SerializationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.output is None:
        print(data)
        return

    Path(args.output).write_text(data, encoding="utf-8")
    print(f"Wrote {len(router.table)} rules to {args.output}")
