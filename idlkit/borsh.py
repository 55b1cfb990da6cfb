"""Borsh tokens, instruction discriminators and return-data decoding."""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from solders.pubkey import Pubkey

from .constants import DISCRIMINATOR_SIZE, LENGTH_PREFIX_SIZE, PUBKEY_SIZE
from .errors import DecodeError, TypeNotFoundError, UnsupportedTypeError
from .idl import IdlEnum, IdlStruct, IdlTypeDefinition, find_type_definition
from .types import (
    Array,
    Bool,
    Bytes,
    Defined,
    Float,
    IdlType,
    Int,
    Option,
    PublicKey,
    String,
    Uint,
    Vec,
)


@dataclass
class BoolToken:
    value: bool


@dataclass
class UintToken:
    width: int
    value: int


@dataclass
class IntToken:
    width: int
    value: int


@dataclass
class BytesToken:
    value: bytes


@dataclass
class StringToken:
    value: str


@dataclass
class AddressToken:
    value: bytes


@dataclass
class ArrayToken:
    """Dynamically sized array; serialized with a u32 element count."""

    items: List["BorshToken"]


@dataclass
class FixedArrayToken:
    items: List["BorshToken"]


@dataclass
class TupleToken:
    """Record fields laid out inline, in declaration order."""

    items: List["BorshToken"]
    names: List[str] = field(default_factory=list)


@dataclass
class EnumToken:
    """Decoded enum value; encodes as its u8 variant index."""

    index: int
    name: str


BorshToken = Union[
    BoolToken,
    UintToken,
    IntToken,
    BytesToken,
    StringToken,
    AddressToken,
    ArrayToken,
    FixedArrayToken,
    TupleToken,
    EnumToken,
]


def discriminator(namespace: str, name: str) -> bytes:
    preimage = f"{namespace}:{name}".encode("utf-8")
    return hashlib.sha256(preimage).digest()[:DISCRIMINATOR_SIZE]


def _int_bytes(value: int, width: int, signed: bool) -> bytes:
    try:
        return value.to_bytes(width // 8, "little", signed=signed)
    except OverflowError as exc:
        kind = "i" if signed else "u"
        raise ValueError(f"value {value} does not fit in {kind}{width}") from exc


def _length_prefix(count: int) -> bytes:
    return struct.pack("<I", count)


def encode_token(token: BorshToken, out: bytearray) -> None:
    if isinstance(token, BoolToken):
        out.append(1 if token.value else 0)
    elif isinstance(token, UintToken):
        out += _int_bytes(token.value, token.width, signed=False)
    elif isinstance(token, IntToken):
        out += _int_bytes(token.value, token.width, signed=True)
    elif isinstance(token, BytesToken):
        out += _length_prefix(len(token.value))
        out += token.value
    elif isinstance(token, StringToken):
        encoded = token.value.encode("utf-8")
        out += _length_prefix(len(encoded))
        out += encoded
    elif isinstance(token, AddressToken):
        if len(token.value) != PUBKEY_SIZE:
            raise ValueError(f"address must be {PUBKEY_SIZE} bytes, got {len(token.value)}")
        out += token.value
    elif isinstance(token, ArrayToken):
        out += _length_prefix(len(token.items))
        for item in token.items:
            encode_token(item, out)
    elif isinstance(token, (FixedArrayToken, TupleToken)):
        for item in token.items:
            encode_token(item, out)
    elif isinstance(token, EnumToken):
        out.append(token.index)
    else:
        raise TypeError(f"not a borsh token: {token!r}")


def encode_arguments(tokens: Sequence[BorshToken]) -> bytes:
    out = bytearray()
    for token in tokens:
        encode_token(token, out)
    return bytes(out)


def _take(data: bytes, offset: int, size: int, what: str) -> bytes:
    end = offset + size
    if offset < 0 or end > len(data):
        raise DecodeError(
            f"return data too short reading {what}: need {size} bytes at offset {offset}, have {len(data)}"
        )
    return data[offset:end]


def _read_length(data: bytes, offset: int, what: str) -> int:
    (count,) = struct.unpack("<I", _take(data, offset, LENGTH_PREFIX_SIZE, f"{what} length"))
    return count


def decode_at_offset(
    data: bytes,
    offset: int,
    ty: IdlType,
    custom_types: List[IdlTypeDefinition],
) -> Tuple[BorshToken, int]:
    """Decode one value of type ``ty`` at ``offset``; returns the token and the next offset."""
    if isinstance(ty, Bool):
        raw = _take(data, offset, 1, "bool")
        return BoolToken(raw[0] != 0), offset + 1
    if isinstance(ty, (Uint, Int)):
        size = ty.width // 8
        signed = isinstance(ty, Int)
        raw = _take(data, offset, size, f"{'i' if signed else 'u'}{ty.width}")
        value = int.from_bytes(raw, "little", signed=signed)
        token = IntToken(ty.width, value) if signed else UintToken(ty.width, value)
        return token, offset + size
    if isinstance(ty, Float):
        raise UnsupportedTypeError("Float")
    if isinstance(ty, Option):
        raise UnsupportedTypeError("Option")
    if isinstance(ty, Bytes):
        count = _read_length(data, offset, "bytes")
        offset += LENGTH_PREFIX_SIZE
        return BytesToken(_take(data, offset, count, "bytes")), offset + count
    if isinstance(ty, String):
        count = _read_length(data, offset, "string")
        offset += LENGTH_PREFIX_SIZE
        raw = _take(data, offset, count, "string")
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"string at offset {offset} is not valid UTF-8") from exc
        return StringToken(text), offset + count
    if isinstance(ty, PublicKey):
        raw = _take(data, offset, PUBKEY_SIZE, "publicKey")
        return AddressToken(raw), offset + PUBKEY_SIZE
    if isinstance(ty, Vec):
        count = _read_length(data, offset, "vec")
        offset += LENGTH_PREFIX_SIZE
        items: List[BorshToken] = []
        for _ in range(count):
            item, offset = decode_at_offset(data, offset, ty.elem, custom_types)
            items.append(item)
        return ArrayToken(items), offset
    if isinstance(ty, Array):
        items = []
        for _ in range(ty.size):
            item, offset = decode_at_offset(data, offset, ty.elem, custom_types)
            items.append(item)
        return FixedArrayToken(items), offset
    if isinstance(ty, Defined):
        definition = find_type_definition(custom_types, ty.name)
        if definition is None:
            raise TypeNotFoundError(ty.name)
        if isinstance(definition.ty, IdlStruct):
            items = []
            names: List[str] = []
            for fld in definition.ty.fields:
                item, offset = decode_at_offset(data, offset, fld.ty, custom_types)
                items.append(item)
                names.append(fld.name)
            return TupleToken(items, names), offset
        if isinstance(definition.ty, IdlEnum):
            index = _take(data, offset, 1, ty.name)[0]
            variants = definition.ty.variants
            if index >= len(variants):
                raise DecodeError(f"variant index {index} out of range for {ty.name} ({len(variants)} variants)")
            return EnumToken(index, variants[index].name), offset + 1
    raise TypeError(f"not an IDL type: {ty!r}")


def render_token(token: BorshToken) -> str:
    if isinstance(token, BoolToken):
        return "true" if token.value else "false"
    if isinstance(token, (UintToken, IntToken)):
        return str(token.value)
    if isinstance(token, BytesToken):
        return "0x" + token.value.hex()
    if isinstance(token, StringToken):
        return token.value
    if isinstance(token, AddressToken):
        return str(Pubkey.from_bytes(token.value))
    if isinstance(token, (ArrayToken, FixedArrayToken)):
        return "[" + ", ".join(render_token(item) for item in token.items) + "]"
    if isinstance(token, TupleToken):
        if len(token.names) == len(token.items):
            parts = [f"{name}: {render_token(item)}" for name, item in zip(token.names, token.items)]
        else:
            parts = [render_token(item) for item in token.items]
        return "{" + ", ".join(parts) + "}"
    if isinstance(token, EnumToken):
        return token.name
    raise TypeError(f"not a borsh token: {token!r}")


def decode_return_value(
    data: bytes,
    offset: int,
    ty: Optional[IdlType],
    custom_types: List[IdlTypeDefinition],
) -> Optional[Tuple[str, int]]:
    """Render the value at ``offset``; returns ``(text, bytes consumed)`` or ``None`` without a type."""
    if ty is None:
        return None
    token, end = decode_at_offset(data, offset, ty, custom_types)
    return render_token(token), end - offset
