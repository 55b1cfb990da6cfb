"""Declared IDL types.

The set is closed: every IDL type spelling maps onto one of the dataclasses
below, and the encoder/decoder dispatch on them with ``isinstance`` chains.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .constants import FLOAT_WIDTHS, INT_WIDTHS


@dataclass(frozen=True)
class Bool:
    pass


@dataclass(frozen=True)
class Uint:
    width: int


@dataclass(frozen=True)
class Int:
    width: int


@dataclass(frozen=True)
class Float:
    width: int


@dataclass(frozen=True)
class Bytes:
    pass


@dataclass(frozen=True)
class String:
    pass


@dataclass(frozen=True)
class PublicKey:
    pass


@dataclass(frozen=True)
class Vec:
    elem: "IdlType"


@dataclass(frozen=True)
class Array:
    elem: "IdlType"
    size: int


@dataclass(frozen=True)
class Defined:
    name: str


@dataclass(frozen=True)
class Option:
    inner: "IdlType"


IdlType = Union[Bool, Uint, Int, Float, Bytes, String, PublicKey, Vec, Array, Defined, Option]


_PRIMITIVES: dict[str, IdlType] = {
    "bool": Bool(),
    "bytes": Bytes(),
    "string": String(),
    "publicKey": PublicKey(),
    "pubkey": PublicKey(),
}
for _width in INT_WIDTHS:
    _PRIMITIVES[f"u{_width}"] = Uint(_width)
    _PRIMITIVES[f"i{_width}"] = Int(_width)
for _width in FLOAT_WIDTHS:
    _PRIMITIVES[f"f{_width}"] = Float(_width)


def parse_idl_type(raw: Any) -> IdlType:
    """Parse the JSON spelling of an IDL type."""
    if isinstance(raw, str):
        ty = _PRIMITIVES.get(raw)
        if ty is None:
            raise ValueError(f"unknown type: {raw!r}")
        return ty
    if isinstance(raw, dict) and len(raw) == 1:
        (kind, value), = raw.items()
        if kind == "vec":
            return Vec(parse_idl_type(value))
        if kind == "array":
            if not (isinstance(value, list) and len(value) == 2 and isinstance(value[1], int)):
                raise ValueError(f"array type must be [elem, size]: {value!r}")
            if value[1] < 0:
                raise ValueError(f"array size must be non-negative: {value[1]}")
            return Array(parse_idl_type(value[0]), value[1])
        if kind == "defined":
            if isinstance(value, dict):
                value = value.get("name")
            if not isinstance(value, str) or not value:
                raise ValueError(f"defined type must name a type: {raw!r}")
            return Defined(value)
        if kind == "option":
            return Option(parse_idl_type(value))
    raise ValueError(f"unknown type: {raw!r}")


def type_to_json(ty: IdlType) -> Any:
    if isinstance(ty, Bool):
        return "bool"
    if isinstance(ty, Uint):
        return f"u{ty.width}"
    if isinstance(ty, Int):
        return f"i{ty.width}"
    if isinstance(ty, Float):
        return f"f{ty.width}"
    if isinstance(ty, Bytes):
        return "bytes"
    if isinstance(ty, String):
        return "string"
    if isinstance(ty, PublicKey):
        return "publicKey"
    if isinstance(ty, Vec):
        return {"vec": type_to_json(ty.elem)}
    if isinstance(ty, Array):
        return {"array": [type_to_json(ty.elem), ty.size]}
    if isinstance(ty, Defined):
        return {"defined": ty.name}
    if isinstance(ty, Option):
        return {"option": type_to_json(ty.inner)}
    raise TypeError(f"not an IDL type: {ty!r}")


def type_name(ty: IdlType) -> str:
    """Short human spelling, e.g. ``Vec<u8>`` or ``[u8; 4]``."""
    if isinstance(ty, Vec):
        return f"Vec<{type_name(ty.elem)}>"
    if isinstance(ty, Array):
        return f"[{type_name(ty.elem)}; {ty.size}]"
    if isinstance(ty, Defined):
        return ty.name
    if isinstance(ty, Option):
        return f"Option<{type_name(ty.inner)}>"
    return type_to_json(ty)
