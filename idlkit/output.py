"""Human and JSON output for IDL instructions and submitted transactions."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, List, Optional, Sequence

from .borsh import decode_return_value
from .constants import RETURN_LOG_PREFIX
from .errors import DecodeError
from .idl import Idl, IdlAccount, IdlAccountItem, IdlInstruction, IdlTypeDefinition, find_instruction
from .types import type_name, type_to_json


def _print_title(title: str) -> None:
    print(f"\n{title}")


def _print_subtitle(title: str) -> None:
    print(f"\n  {title}")


def _print_key_value(key: str, value: Any) -> None:
    print(f"    {key:<15}: {value}")


def _print_value(value: Any) -> None:
    print(f"    {value}")


def _account_to_json(account: IdlAccountItem) -> Dict[str, Any]:
    if isinstance(account, IdlAccount):
        out: Dict[str, Any] = {
            "name": account.name,
            "isMut": account.is_mut,
            "isSigner": account.is_signer,
        }
        if account.is_optional:
            out["isOptional"] = True
        if account.docs:
            out["docs"] = account.docs
        if account.pda is not None:
            out["pda"] = account.pda
        return out
    return {"name": account.name, "accounts": [_account_to_json(a) for a in account.accounts]}


def instruction_to_json(instruction: IdlInstruction) -> Dict[str, Any]:
    if instruction.raw:
        return instruction.raw
    out: Dict[str, Any] = {
        "name": instruction.name,
        "accounts": [_account_to_json(a) for a in instruction.accounts],
        "args": [{"name": a.name, "type": type_to_json(a.ty)} for a in instruction.args],
    }
    if instruction.docs:
        out["docs"] = instruction.docs
    if instruction.returns is not None:
        out["returns"] = type_to_json(instruction.returns)
    return out


def print_single_instruction_info(instruction: IdlInstruction, output_json: bool) -> None:
    if output_json:
        print(json.dumps(instruction_to_json(instruction), indent=2))
        return

    _print_title("Instruction name")
    _print_value(instruction.name)

    _print_title("Instruction docs")
    _print_value("\n".join(instruction.docs) if instruction.docs else "No documentation")

    _print_title("Accounts")
    if not instruction.accounts:
        _print_value("No accounts")
    for i, account in enumerate(instruction.accounts, start=1):
        _print_subtitle(f"Account {i}")
        if isinstance(account, IdlAccount):
            _print_key_value("Account name", account.name)
            _print_key_value("Is signer", str(account.is_signer).lower())
            _print_key_value("Is mutable", str(account.is_mut).lower())
            _print_key_value("Is optional", str(account.is_optional).lower())
            _print_key_value("Account docs", account.docs)
            _print_key_value("Account PDA", account.pda)
        else:
            print("    Nested accounts are not supported")
            _print_key_value(account.name, [_account_to_json(a) for a in account.accounts])

    _print_title("Args")
    if not instruction.args:
        _print_value("No arguments")
    for i, arg in enumerate(instruction.args, start=1):
        _print_subtitle(f"Arg {i}")
        _print_key_value("Arg name", arg.name)
        _print_key_value("Arg type", type_name(arg.ty))
        _print_key_value("Arg docs", arg.docs)

    if instruction.returns is not None:
        _print_title("Returns")
        _print_value(type_name(instruction.returns))


def print_idl_instruction_info(idl: Idl, instruction_name: Optional[str] = None, output_json: bool = False) -> None:
    if instruction_name is not None:
        print_single_instruction_info(find_instruction(idl, instruction_name), output_json)
        return
    if output_json:
        # A single JSON document for every instruction.
        print(json.dumps([instruction_to_json(i) for i in idl.instructions], indent=2))
        return
    for instruction in idl.instructions:
        print_single_instruction_info(instruction, output_json)


def return_data_from_logs(logs: Sequence[str]) -> List[bytes]:
    """Extract base64 payloads from ``Program return: <program> <base64>`` lines."""
    payloads: List[bytes] = []
    for line in logs:
        if RETURN_LOG_PREFIX not in line:
            continue
        parts = line.split()
        if not parts:
            raise DecodeError("Error extracting transaction return data from log")
        try:
            payloads.append(base64.b64decode(parts[-1], validate=True))
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(f"Error decoding transaction return data: {exc}") from exc
    return payloads


def decode_instruction_return_data(
    logs: Optional[Sequence[str]],
    instruction: IdlInstruction,
    custom_types: List[IdlTypeDefinition],
) -> Optional[str]:
    """Decode the instruction's return value from execution logs; None if it returns nothing."""
    if instruction.returns is None:
        return None
    response = ""
    for payload in return_data_from_logs(logs or []):
        decoded = decode_return_value(payload, 0, instruction.returns, custom_types)
        if decoded is not None:
            response += decoded[0]
    return response


def _transaction_meta(tx_value: Any) -> Any:
    return tx_value.transaction.meta


def print_transaction_information(
    tx_value: Any,
    signature: Any,
    instruction: IdlInstruction,
    custom_types: List[IdlTypeDefinition],
    new_accounts: Sequence[Any],
    output_json: bool,
) -> None:
    """Report a confirmed transaction fetched with ``SolanaTransaction.fetch``."""
    meta = _transaction_meta(tx_value)
    logs = list(meta.log_messages or []) if meta is not None else []
    decoded = decode_instruction_return_data(logs, instruction, custom_types)
    decoded_text = decoded if decoded is not None else "None"

    if output_json:
        payload = json.loads(tx_value.to_json())
        if new_accounts:
            payload["new_accounts"] = [
                {"pubkey": str(pubkey), "file_name": path} for pubkey, path in new_accounts
            ]
        payload["decoded_return_data"] = decoded_text
        print(json.dumps(payload, indent=2))
        return

    _print_title("Signature")
    _print_value(signature)
    _print_title("Slot")
    _print_value(tx_value.slot)

    if new_accounts:
        _print_title("New accounts")
        for i, (pubkey, path) in enumerate(new_accounts, start=1):
            _print_subtitle(f"New account {i}")
            _print_key_value("Pubkey", pubkey)
            _print_key_value("File name", path)

    if meta is not None:
        _print_title("Transaction status")
        _print_key_value("Status", "Ok" if meta.err is None else "Error")
        if meta.err is not None:
            _print_key_value("Error", meta.err)
        _print_key_value("Fee", meta.fee)

    _print_title("Transaction return data")
    _print_value(decoded_text)

    if logs:
        _print_subtitle("Logs")
        for line in logs:
            _print_value(line)
