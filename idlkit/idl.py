"""IDL loading for Solana programs (Anchor / Solang JSON layout)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import FileError, InstructionNotFoundError, SchemaParseError
from .types import IdlType, parse_idl_type


@dataclass
class IdlField:
    name: str
    ty: IdlType
    docs: List[str] = field(default_factory=list)


@dataclass
class IdlAccount:
    name: str
    is_mut: bool
    is_signer: bool
    is_optional: bool = False
    docs: List[str] = field(default_factory=list)
    pda: Optional[Dict[str, Any]] = None


@dataclass
class IdlAccounts:
    """A nested account group. Parsed so it can be shown, never resolved."""

    name: str
    accounts: List["IdlAccountItem"]


IdlAccountItem = Union[IdlAccount, IdlAccounts]


@dataclass
class IdlEnumVariant:
    name: str


@dataclass
class IdlStruct:
    fields: List[IdlField]


@dataclass
class IdlEnum:
    variants: List[IdlEnumVariant]


@dataclass
class IdlTypeDefinition:
    name: str
    ty: Union[IdlStruct, IdlEnum]


@dataclass
class IdlInstruction:
    name: str
    args: List[IdlField]
    accounts: List[IdlAccountItem]
    returns: Optional[IdlType] = None
    docs: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class Idl:
    name: str
    version: str
    instructions: List[IdlInstruction]
    types: List[IdlTypeDefinition]
    metadata: Dict[str, Any] = field(default_factory=dict)


def _docs(entry: Dict[str, Any]) -> List[str]:
    docs = entry.get("docs")
    if isinstance(docs, list):
        return [str(line) for line in docs]
    return []


def _require_str(entry: Dict[str, Any], key: str, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{where}.{key} must be a string")
    return value


def _require_list(entry: Dict[str, Any], key: str, where: str) -> List[Any]:
    value = entry.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"{where}.{key} must be a list")
    return value


def _parse_field(entry: Any, where: str) -> IdlField:
    if not isinstance(entry, dict):
        raise ValueError(f"{where} must be an object")
    name = _require_str(entry, "name", where)
    if "type" not in entry:
        raise ValueError(f"{where}.type missing")
    return IdlField(name=name, ty=parse_idl_type(entry["type"]), docs=_docs(entry))


def _parse_account_item(entry: Any, where: str) -> IdlAccountItem:
    if not isinstance(entry, dict):
        raise ValueError(f"{where} must be an object")
    name = _require_str(entry, "name", where)
    if "accounts" in entry:
        nested = _require_list(entry, "accounts", where)
        return IdlAccounts(
            name=name,
            accounts=[_parse_account_item(item, f"{where}.accounts[{i}]") for i, item in enumerate(nested)],
        )
    pda = entry.get("pda") if isinstance(entry.get("pda"), dict) else None
    return IdlAccount(
        name=name,
        is_mut=bool(entry.get("isMut", entry.get("writable", False))),
        is_signer=bool(entry.get("isSigner", entry.get("signer", False))),
        is_optional=bool(entry.get("isOptional", entry.get("optional", False))),
        docs=_docs(entry),
        pda=pda,
    )


def _parse_instruction(entry: Any, where: str) -> IdlInstruction:
    if not isinstance(entry, dict):
        raise ValueError(f"{where} must be an object")
    name = _require_str(entry, "name", where)
    args = [_parse_field(a, f"{where}.args[{i}]") for i, a in enumerate(_require_list(entry, "args", where))]
    accounts = [
        _parse_account_item(a, f"{where}.accounts[{i}]")
        for i, a in enumerate(_require_list(entry, "accounts", where))
    ]
    returns = entry.get("returns")
    return IdlInstruction(
        name=name,
        args=args,
        accounts=accounts,
        returns=parse_idl_type(returns) if returns is not None else None,
        docs=_docs(entry),
        raw=entry,
    )


def _parse_type_definition(entry: Any, where: str) -> IdlTypeDefinition:
    if not isinstance(entry, dict):
        raise ValueError(f"{where} must be an object")
    name = _require_str(entry, "name", where)
    body = entry.get("type")
    if not isinstance(body, dict):
        raise ValueError(f"{where}.type must be an object")
    kind = body.get("kind")
    if kind == "struct":
        fields = _require_list(body, "fields", f"{where}.type")
        return IdlTypeDefinition(
            name=name,
            ty=IdlStruct([_parse_field(f, f"{where}.type.fields[{i}]") for i, f in enumerate(fields)]),
        )
    if kind == "enum":
        variants: List[IdlEnumVariant] = []
        for i, variant in enumerate(_require_list(body, "variants", f"{where}.type")):
            if not isinstance(variant, dict):
                raise ValueError(f"{where}.type.variants[{i}] must be an object")
            variants.append(IdlEnumVariant(_require_str(variant, "name", f"{where}.type.variants[{i}]")))
        return IdlTypeDefinition(name=name, ty=IdlEnum(variants))
    raise ValueError(f"{where}.type.kind must be 'struct' or 'enum'")


def parse_idl(data: Dict[str, Any]) -> Idl:
    if not isinstance(data, dict):
        raise ValueError("IDL must be a JSON object")
    instructions = [
        _parse_instruction(entry, f"instructions[{i}]")
        for i, entry in enumerate(_require_list(data, "instructions", "idl"))
    ]
    types = [
        _parse_type_definition(entry, f"types[{i}]")
        for i, entry in enumerate(_require_list(data, "types", "idl"))
    ]
    metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
    return Idl(
        name=str(data.get("name", "")),
        version=str(data.get("version", "")),
        instructions=instructions,
        types=types,
        metadata=metadata,
    )


def load_idl(path: str | Path) -> Idl:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileError(str(path), exc) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaParseError(str(path), exc) from exc
    try:
        return parse_idl(data)
    except ValueError as exc:
        raise SchemaParseError(str(path), exc) from exc


def find_instruction(idl: Idl, name: str) -> IdlInstruction:
    for instruction in idl.instructions:
        if instruction.name == name:
            return instruction
    raise InstructionNotFoundError(name)


def find_type_definition(custom_types: List[IdlTypeDefinition], name: str) -> Optional[IdlTypeDefinition]:
    for definition in custom_types:
        if definition.name == name:
            return definition
    return None
