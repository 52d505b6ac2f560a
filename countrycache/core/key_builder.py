"""Deterministic cache key encoding.

Arguments are normalized into plain JSON structures before encoding, so
the same arguments give the same key in every process:

- str, int, float, bool and None are kept as-is; lists stay lists.
- Every other value becomes a tagged JSON object (``{"__tuple__": [...]}``,
  ``{"__set__": [...]}``, ``{"__dict__": [[k, v], ...]}``, ...). Caller
  data never produces a JSON object of its own, so tags cannot collide
  with it.
- Sets and dict entries are sorted by their canonical encoding, which
  removes any dependence on insertion order or the hash seed.
- Objects are encoded by type name plus ``vars()``, never by ``id``.
"""

import base64
import inspect
import json
from enum import Enum
from typing import Any, FrozenSet, Sequence

JSON_NATIVE = (str, int, float, bool, type(None))


def _qualname(obj: Any) -> str:
    return f"{getattr(obj, '__module__', '?')}.{getattr(obj, '__qualname__', type(obj).__name__)}"


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def normalize(value: Any, _active: FrozenSet[int] = frozenset()) -> Any:
    """Converts a value into a JSON-encodable structure with a stable encoding."""
    if isinstance(value, Enum):
        return {"__enum__": _qualname(type(value)), "name": value.name}
    if isinstance(value, JSON_NATIVE):
        return value
    if isinstance(value, (bytes, bytearray)):
        return {"__bytes__": base64.b64encode(bytes(value)).decode("ascii")}
    if inspect.isclass(value) or inspect.isroutine(value):
        return {"__ref__": _qualname(value)}

    # Containers and objects can refer back to themselves
    if id(value) in _active:
        return {"__cycle__": _qualname(type(value))}
    active = _active | {id(value)}

    if isinstance(value, list):
        return [normalize(item, active) for item in value]
    if isinstance(value, tuple):
        return {"__tuple__": [normalize(item, active) for item in value]}
    if isinstance(value, (set, frozenset)):
        tag = "__frozenset__" if isinstance(value, frozenset) else "__set__"
        return {tag: sorted((normalize(item, active) for item in value), key=_canonical)}
    if isinstance(value, dict):
        pairs = [[normalize(k, active), normalize(v, active)] for k, v in value.items()]
        return {"__dict__": sorted(pairs, key=lambda pair: _canonical(pair[0]))}
    if hasattr(value, "__dict__"):
        return {"__object__": _qualname(type(value)), "state": normalize(dict(vars(value)), active)}

    # Slotted and builtin values (datetime, Decimal, Path, UUID) have stable reprs
    return {"__repr__": _qualname(type(value)), "value": repr(value)}


def encode_key(args: Sequence[Any]) -> str:
    """Serializes an argument list and returns it base64-encoded."""
    serialized = _canonical(normalize(list(args)))
    return base64.b64encode(serialized.encode("utf-8")).decode("ascii")
