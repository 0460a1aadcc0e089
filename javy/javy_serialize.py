from __future__ import annotations

import json
from typing import Any
import collections.abc

import yaml

from javy.javy_datatypes import Method, Scope, Variable


def _to_builtin(obj: Any) -> Any:
    # Integral floats become ints so `14.0` is written as `14`
    if isinstance(obj, bool) or obj is None or isinstance(obj, str):
        return obj
    if isinstance(obj, float) and obj.is_integer():
        return int(obj)
    if isinstance(obj, (int, float)):
        return obj
    if isinstance(obj, Variable):
        return _to_builtin(obj.value)
    if isinstance(obj, Scope):
        return {v.name: _to_builtin(v.value) for v in sorted(obj.variables.values())}
    if isinstance(obj, Method):
        from javy.javy_printer import Printer
        return Printer().pformat(obj)
    if isinstance(obj, collections.abc.Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_builtin(x) for x in obj]
    return str(obj)


def serialize(value: Any, *, fmt: str, pretty: bool = True) -> str:
    """
    Convert Javy bindings (or a scope, or a single value) into text.
    - fmt: 'json' | 'yaml'
    """
    f = (fmt or '').lower()
    built = _to_builtin(value)
    if f == 'json':
        return json.dumps(built, ensure_ascii=False, indent=2 if pretty else None)
    if f == 'yaml':
        return yaml.safe_dump(built, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported serialization format: {fmt!r}")


__all__ = [
    "serialize",
]
