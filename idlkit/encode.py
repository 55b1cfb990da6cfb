"""Instruction data encoding from command-line strings.

Each declared argument consumes one raw string. The expected input format
depends on the declared type:

- scalars are parsed from their text (``true``, ``-12``, ...),
- ``bytes`` is hex, ``publicKey`` is base58,
- vectors and fixed arrays are comma-separated lists (``1,2,3``),
- structs are JSON objects, given inline or as a path to a JSON file,
- enums are the variant name.
"""

from __future__ import annotations

import binascii
import json
import re
from pathlib import Path
from typing import Any, List, Sequence

from solders.pubkey import Pubkey

from .borsh import (
    AddressToken,
    ArrayToken,
    BoolToken,
    BorshToken,
    BytesToken,
    FixedArrayToken,
    IntToken,
    StringToken,
    TupleToken,
    UintToken,
    discriminator,
    encode_arguments,
)
from .constants import GLOBAL_NAMESPACE
from .errors import (
    ArraySizeMismatchError,
    MissingArgumentError,
    MissingFieldError,
    ParseError,
    TypeNotFoundError,
    UnsupportedTypeError,
    VariantNotFoundError,
)
from .idl import IdlEnum, IdlInstruction, IdlStruct, IdlTypeDefinition, find_type_definition
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

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")


def construct_instruction_data(
    instruction: IdlInstruction,
    raw_args: Sequence[str],
    custom_types: List[IdlTypeDefinition],
) -> bytes:
    """Return ``discriminator("global", name) || borsh(args)`` for ``instruction``."""
    data = bytearray(discriminator(GLOBAL_NAMESPACE, instruction.name))
    tokens: List[BorshToken] = []
    for i, arg in enumerate(instruction.args):
        if i >= len(raw_args):
            raise MissingArgumentError(arg.name)
        tokens.extend(get_borsh_tokens(raw_args[i], arg.ty, custom_types))
    data += encode_arguments(tokens)
    return bytes(data)


def _parse_int(value: str, ty: IdlType) -> int:
    signed = isinstance(ty, Int)
    name = f"{'i' if signed else 'u'}{ty.width}"
    expected = "signed integer" if signed else "unsigned integer"
    pattern = _SIGNED_RE if signed else _UNSIGNED_RE
    if not pattern.fullmatch(value):
        raise ParseError(name, expected, value)
    parsed = int(value, 10)
    if signed:
        low, high = -(1 << (ty.width - 1)), (1 << (ty.width - 1)) - 1
    else:
        low, high = 0, (1 << ty.width) - 1
    if parsed < low or parsed > high:
        raise ParseError(name, expected, value)
    return parsed


def _element_token(tokens: List[BorshToken]) -> BorshToken:
    # Defined struct elements expand to several tokens; keep them as one element.
    if len(tokens) == 1:
        return tokens[0]
    return TupleToken(tokens)


def get_borsh_tokens(
    value: str,
    ty: IdlType,
    custom_types: List[IdlTypeDefinition],
) -> List[BorshToken]:
    """Convert one raw argument string into the tokens for ``ty``."""
    if isinstance(ty, Bool):
        if value == "true":
            return [BoolToken(True)]
        if value == "false":
            return [BoolToken(False)]
        raise ParseError("bool", "boolean", value)
    if isinstance(ty, Uint):
        return [UintToken(ty.width, _parse_int(value, ty))]
    if isinstance(ty, Int):
        return [IntToken(ty.width, _parse_int(value, ty))]
    if isinstance(ty, Float):
        raise UnsupportedTypeError("Float")
    if isinstance(ty, Option):
        raise UnsupportedTypeError("Option")
    if isinstance(ty, Bytes):
        try:
            return [BytesToken(binascii.unhexlify(value))]
        except (binascii.Error, ValueError) as exc:
            raise ParseError("Bytes", "hex string", value) from exc
    if isinstance(ty, String):
        return [StringToken(value)]
    if isinstance(ty, PublicKey):
        try:
            return [AddressToken(bytes(Pubkey.from_string(value)))]
        except ValueError as exc:
            raise ParseError("PublicKey", "base58 string", value) from exc
    if isinstance(ty, Vec):
        items = [_element_token(get_borsh_tokens(item, ty.elem, custom_types)) for item in value.split(",")]
        return [ArrayToken(items)]
    if isinstance(ty, Array):
        parts = value.split(",")
        if len(parts) != ty.size:
            raise ArraySizeMismatchError(ty.size, len(parts), value)
        items = [_element_token(get_borsh_tokens(item, ty.elem, custom_types)) for item in parts]
        return [FixedArrayToken(items)]
    if isinstance(ty, Defined):
        definition = find_type_definition(custom_types, ty.name)
        if definition is None:
            raise TypeNotFoundError(ty.name)
        return encode_defined_type(value, definition, custom_types)
    raise TypeError(f"not an IDL type: {ty!r}")


def _read_struct_text(value: str) -> str:
    try:
        return Path(value).read_text(encoding="utf-8")
    except (OSError, ValueError):
        return value


def _field_text(value: Any, ty: IdlType) -> str:
    # JSON strings keep their quotes for `string` fields; other types get the bare text.
    if isinstance(value, str) and not isinstance(ty, String):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _tokens_from_json(value: Any, ty: IdlType, custom_types: List[IdlTypeDefinition]) -> List[BorshToken]:
    if isinstance(value, list) and isinstance(ty, (Vec, Array)):
        if isinstance(ty, Array) and len(value) != ty.size:
            raise ArraySizeMismatchError(ty.size, len(value), json.dumps(value))
        items = [_element_token(_tokens_from_json(item, ty.elem, custom_types)) for item in value]
        return [ArrayToken(items) if isinstance(ty, Vec) else FixedArrayToken(items)]
    return get_borsh_tokens(_field_text(value, ty), ty, custom_types)


def encode_defined_type(
    value: str,
    definition: IdlTypeDefinition,
    custom_types: List[IdlTypeDefinition],
) -> List[BorshToken]:
    if isinstance(definition.ty, IdlStruct):
        text = _read_struct_text(value)
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError("Struct", "JSON object", text) from exc
        if not isinstance(obj, dict):
            raise ParseError("Struct", "JSON object", text)
        tokens: List[BorshToken] = []
        for fld in definition.ty.fields:
            if fld.name not in obj:
                raise MissingFieldError(fld.name)
            tokens.extend(_tokens_from_json(obj[fld.name], fld.ty, custom_types))
        return tokens
    if isinstance(definition.ty, IdlEnum):
        name = value.strip('"')
        names = [variant.name for variant in definition.ty.variants]
        if name not in names:
            raise VariantNotFoundError(name, definition.name, names)
        return get_borsh_tokens(str(names.index(name)), Uint(8), custom_types)
    raise TypeError(f"unknown type definition: {definition!r}")
