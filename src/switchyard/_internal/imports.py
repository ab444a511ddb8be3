"""Dotted-attribute imports shared by controller references and the CLI."""

import importlib
from typing import Any


def import_object(module_name: str, qualname: str) -> Any:
    """Import *module_name* and walk the dotted *qualname* inside it.

    Raises ``ImportError`` or ``AttributeError`` when either part is missing.
    """
    target: Any = importlib.import_module(module_name)
    for attr in qualname.split("."):
        target = getattr(target, attr)
    return target
