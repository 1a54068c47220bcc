"""Serialization of entity records to and from stored JSON documents."""

from __future__ import annotations

import dataclasses
import types
from enum import Enum
from functools import cache
from typing import Any, TypeAliasType, Union, get_args, get_origin, get_type_hints

import orjson

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _unalias(hint: Any) -> Any:
    while isinstance(hint, TypeAliasType):
        hint = hint.__value__
    return hint


@cache
def _field_hints(cls: type) -> tuple[tuple[str, Any], ...]:
    hints = get_type_hints(cls)
    return tuple((f.name, _unalias(hints[f.name])) for f in dataclasses.fields(cls))


def encode_value(value: Any) -> Any:
    """Convert a record field into a JSON-compatible value.

    Integers outside the signed 64-bit range are written as decimal strings.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
        return str(value)
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, tuple | list):
        return [encode_value(item) for item in value]
    raise TypeError(f"Cannot encode value of type {type(value).__name__}")


def decode_value(hint: Any, value: Any) -> Any:
    """Convert a stored JSON value back into the type named by ``hint``."""
    hint = _unalias(hint)
    if value is None:
        return None

    origin = get_origin(hint)
    if origin in (Union, types.UnionType):
        candidates = [arg for arg in get_args(hint) if arg is not type(None)]
        return decode_value(candidates[0], value)
    if origin is tuple:
        item_hint = get_args(hint)[0]
        return tuple(decode_value(item_hint, item) for item in value)

    if hint is bytes:
        return bytes.fromhex(value.removeprefix("0x"))
    if isinstance(hint, type) and issubclass(hint, Enum):
        return hint(value)
    if hint is bool:
        return bool(value)
    if hint is int:
        return int(value)
    if hint is str:
        return str(value)
    raise TypeError(f"Unsupported field type: {hint!r}")


class EntitySerializer:
    """Encodes entity dataclasses as orjson documents keyed by field name."""

    def encode(self, entity: Any) -> bytes:
        payload = {
            name: encode_value(getattr(entity, name))
            for name, _ in _field_hints(type(entity))
        }
        return orjson.dumps(payload)

    def decode[E](self, entity_cls: type[E], payload: bytes) -> E:
        data = orjson.loads(payload)
        kwargs = {
            name: decode_value(hint, data[name])
            for name, hint in _field_hints(entity_cls)
            if name in data
        }
        return entity_cls(**kwargs)

    def to_dict(self, entity: Any) -> dict[str, Any]:
        """JSON-compatible dict view of an entity, for display."""
        return {
            name: encode_value(getattr(entity, name))
            for name, _ in _field_hints(type(entity))
        }
