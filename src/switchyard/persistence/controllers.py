"""Controller encoding — tagged, JSON-ready representations of controllers.

Every encoded value is a dict with a ``kind`` key:

    registry  name looked up in an application ``ControllerRegistry``
    data      JSON scalars, lists, and string-keyed dicts, stored as-is
    list      list holding at least one non-plain item, items encoded
    dict      string-keyed dict holding non-plain values, values encoded
    tuple     tuple, items encoded
    ref       importable function or class, stored as ``"module:qualname"``
    enum      enum member, owning class encoded plus the member name
    method    bound method, ``__self__`` encoded plus the method name
    closure   any other function: marshalled code object, globals module,
              defaults, and closure cell contents

``closure`` entries embed CPython bytecode and only load on an interpreter
of the same minor version. Register long-lived controllers by name when
snapshots must outlive an upgrade.
"""

import base64
import enum
import importlib
import marshal
import types
from collections.abc import Callable
from typing import Any, TypeVar

from switchyard._internal.imports import import_object
from switchyard.errors import SerializationError

T = TypeVar("T")

_SCALARS = (str, int, float, bool, type(None))

# Placeholder for register() called without a controller
_MISSING: Any = object()


class ControllerRegistry:
    """Application-supplied name ↔ controller mapping.

    Controllers known to the registry are persisted by name and resolved
    against the registry on load, so snapshots stay independent of how
    the controller is implemented::

        registry = ControllerRegistry()

        @registry.register("users.show")
        def show_user(id): ...

        registry.register("health", lambda: "ok")
    """

    __slots__ = ("_by_id", "_by_name")

    def __init__(self) -> None:
        self._by_name: dict[str, Any] = {}
        self._by_id: dict[int, str] = {}

    def register(self, name: str, controller: Any = _MISSING) -> Any:
        """Register *controller* under *name*.

        With only a name, returns a decorator that registers and returns
        the decorated object.
        """
        if controller is _MISSING:

            def decorator(obj: T) -> T:
                self.register(name, obj)
                return obj

            return decorator

        if name in self._by_name:
            self._by_id.pop(id(self._by_name[name]), None)
        self._by_name[name] = controller
        self._by_id[id(controller)] = name
        return controller

    def name_for(self, controller: Any) -> str | None:
        """Return the name *controller* was registered under, if any."""
        name = self._by_id.get(id(controller))
        if name is not None and self._by_name.get(name) is controller:
            return name
        return None

    def get(self, name: str) -> Any:
        """Return the controller registered as *name*.

        Raises ``SerializationError`` for unknown names.
        """
        try:
            return self._by_name[name]
        except KeyError:
            msg = f"No controller registered as {name!r}"
            raise SerializationError(msg) from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)


def is_plain(value: Any) -> bool:
    """True if *value* survives a JSON round trip unchanged."""
    if type(value) in _SCALARS:
        return True
    if type(value) is list:
        return all(is_plain(item) for item in value)
    if type(value) is dict:
        return all(type(key) is str and is_plain(item) for key, item in value.items())
    return False


def import_path(obj: Any) -> str | None:
    """Return ``"module:qualname"`` if importing that path yields *obj* itself."""
    module_name = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None)
    if not isinstance(module_name, str) or not isinstance(qualname, str) or "<" in qualname:
        return None
    try:
        target = import_object(module_name, qualname)
    except (ImportError, AttributeError):
        return None
    if target is not obj:
        return None
    return f"{module_name}:{qualname}"


def encode_controller(value: Any, registry: ControllerRegistry | None = None) -> dict[str, Any]:
    """Encode *value* into a tagged, JSON-ready dict.

    Raises ``SerializationError`` for values no tag can represent.
    """
    return _encode(value, registry, set())


def _encode(value: Any, registry: ControllerRegistry | None, active: set[int]) -> dict[str, Any]:
    if registry is not None:
        name = registry.name_for(value)
        if name is not None:
            return {"kind": "registry", "name": name}

    if is_plain(value):
        return {"kind": "data", "value": value}

    if id(value) in active:
        msg = f"Cannot serialize self-referencing controller {value!r}"
        raise SerializationError(msg)
    active.add(id(value))
    try:
        return _encode_compound(value, registry, active)
    finally:
        active.discard(id(value))


def _encode_compound(value: Any, registry: ControllerRegistry | None, active: set[int]) -> dict[str, Any]:
    if type(value) is list:
        return {"kind": "list", "items": [_encode(item, registry, active) for item in value]}

    if type(value) is tuple:
        return {"kind": "tuple", "items": [_encode(item, registry, active) for item in value]}

    if type(value) is dict:
        if not all(type(key) is str for key in value):
            msg = f"Cannot serialize dict with non-string keys: {value!r}"
            raise SerializationError(msg)
        return {"kind": "dict", "items": {key: _encode(item, registry, active) for key, item in value.items()}}

    if isinstance(value, enum.Enum):
        return {"kind": "enum", "class": _encode(type(value), registry, active), "name": value.name}

    if isinstance(value, types.MethodType):
        return {
            "kind": "method",
            "self": _encode(value.__self__, registry, active),
            "name": value.__func__.__name__,
        }

    path = import_path(value)
    if path is not None:
        return {"kind": "ref", "path": path}

    if isinstance(value, types.FunctionType):
        return _encode_function(value, registry, active)

    msg = f"Cannot serialize controller {value!r} of type {type(value).__name__}"
    raise SerializationError(msg)


def _encode_function(fn: types.FunctionType, registry: ControllerRegistry | None, active: set[int]) -> dict[str, Any]:
    cells = []
    for name, cell in zip(fn.__code__.co_freevars, fn.__closure__ or (), strict=True):
        try:
            contents = cell.cell_contents
        except ValueError:
            msg = f"Closure variable {name!r} of {fn.__qualname__} is unbound"
            raise SerializationError(msg) from None
        cells.append(_encode(contents, registry, active))

    return {
        "kind": "closure",
        "module": fn.__module__,
        "name": fn.__name__,
        "qualname": fn.__qualname__,
        "code": base64.b64encode(marshal.dumps(fn.__code__)).decode("ascii"),
        "defaults": _encode(fn.__defaults__, registry, active) if fn.__defaults__ else None,
        "kwdefaults": _encode(fn.__kwdefaults__, registry, active) if fn.__kwdefaults__ else None,
        "cells": cells,
    }


def decode_controller(doc: Any, registry: ControllerRegistry | None = None) -> Any:
    """Rebuild a controller from its ``encode_controller()`` form.

    Raises ``SerializationError`` for malformed entries, unknown registry
    names, or references that no longer import.
    """
    if not isinstance(doc, dict):
        msg = f"Expected an encoded controller, got {type(doc).__name__}"
        raise SerializationError(msg)

    kind = doc.get("kind")
    decoder = _DECODERS.get(kind) if isinstance(kind, str) else None
    if decoder is None:
        msg = f"Unknown controller kind {kind!r}"
        raise SerializationError(msg)
    try:
        return decoder(doc, registry)
    except KeyError as exc:
        msg = f"Encoded {kind} controller is missing {exc.args[0]!r}"
        raise SerializationError(msg) from exc
    except (TypeError, AttributeError) as exc:
        msg = f"Malformed encoded {kind} controller: {exc}"
        raise SerializationError(msg) from exc


def _decode_registry(doc: dict[str, Any], registry: ControllerRegistry | None) -> Any:
    if registry is None:
        msg = f"Controller {doc['name']!r} needs a ControllerRegistry to load"
        raise SerializationError(msg)
    return registry.get(doc["name"])


def _decode_ref(doc: dict[str, Any], registry: ControllerRegistry | None) -> Any:
    module_name, _, qualname = doc["path"].partition(":")
    try:
        target = import_object(module_name, qualname)
    except (ImportError, AttributeError) as exc:
        msg = f"Cannot import controller {doc['path']!r}: {exc}"
        raise SerializationError(msg) from exc
    return target


def _decode_enum(doc: dict[str, Any], registry: ControllerRegistry | None) -> Any:
    owner = decode_controller(doc["class"], registry)
    try:
        return owner[doc["name"]]
    except (KeyError, TypeError) as exc:
        msg = f"{owner!r} has no member {doc['name']!r}"
        raise SerializationError(msg) from exc


def _decode_method(doc: dict[str, Any], registry: ControllerRegistry | None) -> Any:
    owner = decode_controller(doc["self"], registry)
    try:
        return getattr(owner, doc["name"])
    except AttributeError as exc:
        msg = f"{owner!r} has no method {doc['name']!r}"
        raise SerializationError(msg) from exc


def _decode_closure(doc: dict[str, Any], registry: ControllerRegistry | None) -> Any:
    try:
        module = importlib.import_module(doc["module"])
    except ImportError as exc:
        msg = f"Cannot import globals module {doc['module']!r} for {doc['qualname']}: {exc}"
        raise SerializationError(msg) from exc

    try:
        code = marshal.loads(base64.b64decode(doc["code"]))
    except (ValueError, EOFError, TypeError) as exc:
        msg = f"Cannot load code object of {doc['qualname']}: {exc}"
        raise SerializationError(msg) from exc
    if not isinstance(code, types.CodeType):
        msg = f"Cannot load code object of {doc['qualname']}: got {type(code).__name__}"
        raise SerializationError(msg)

    cells = tuple(types.CellType(decode_controller(cell, registry)) for cell in doc["cells"])
    defaults = decode_controller(doc["defaults"], registry) if doc["defaults"] else None
    try:
        fn = types.FunctionType(code, module.__dict__, doc["name"], defaults, cells or None)
    except (TypeError, ValueError) as exc:
        msg = f"Cannot rebuild {doc['qualname']}: {exc}"
        raise SerializationError(msg) from exc
    fn.__qualname__ = doc["qualname"]
    if doc["kwdefaults"]:
        fn.__kwdefaults__ = decode_controller(doc["kwdefaults"], registry)
    return fn


_DECODERS: dict[str, Callable[[dict[str, Any], ControllerRegistry | None], Any]] = {
    "registry": _decode_registry,
    "data": lambda doc, registry: doc["value"],
    "list": lambda doc, registry: [decode_controller(item, registry) for item in doc["items"]],
    "tuple": lambda doc, registry: tuple(decode_controller(item, registry) for item in doc["items"]),
    "dict": lambda doc, registry: {key: decode_controller(item, registry) for key, item in doc["items"].items()},
    "ref": _decode_ref,
    "enum": _decode_enum,
    "method": _decode_method,
    "closure": _decode_closure,
}
