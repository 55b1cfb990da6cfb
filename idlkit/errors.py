"""Error taxonomy for idlkit.

Every error derives from ``ValueError`` so the CLI can report any of them the
same way it reports bad input.
"""

from __future__ import annotations

from typing import Iterable


class IdlkitError(ValueError):
    """Base class for all idlkit failures."""


class FileError(IdlkitError):
    """A file could not be opened, read or written."""

    def __init__(self, path: str, cause: object) -> None:
        super().__init__(f"{path}: error: {cause}")
        self.path = path
        self.cause = cause


class SchemaParseError(IdlkitError):
    """An IDL file is not valid JSON or does not have the expected shape."""

    def __init__(self, path: str, cause: object) -> None:
        super().__init__(f"{path}: error: {cause}")
        self.path = path
        self.cause = cause


class ParseError(IdlkitError):
    """A raw argument string does not parse as its declared type."""

    def __init__(self, type_name: str, expected: str, value: str) -> None:
        super().__init__(
            f"The provided argument for {type_name} is not a valid {expected}. "
            f"\nProvided argument: {value}\n"
        )
        self.type_name = type_name
        self.value = value


class MissingArgumentError(IdlkitError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Missing argument {name}")
        self.name = name


class MissingAccountError(IdlkitError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Missing account: {name}")
        self.name = name


class MissingFieldError(IdlkitError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Field {name} not found")
        self.name = name


class TypeNotFoundError(IdlkitError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Type definition with name {name} not found")
        self.name = name


class VariantNotFoundError(IdlkitError):
    def __init__(self, value: str, type_name: str, variants: Iterable[str]) -> None:
        self.variants = list(variants)
        super().__init__(
            f"Variant {value} not found. \nAvailable variants of {type_name}: {self.variants}"
        )
        self.value = value
        self.type_name = type_name


class ArraySizeMismatchError(IdlkitError):
    def __init__(self, expected: int, actual: int, value: str) -> None:
        super().__init__(
            "The number of elements in the array does not match the size of the array "
            f"(expected {expected}, got {actual}). \nProvided argument: {value}\n"
        )
        self.expected = expected
        self.actual = actual


class UnsupportedTypeError(IdlkitError):
    def __init__(self, type_name: str) -> None:
        super().__init__(f"{type_name} is not supported")
        self.type_name = type_name


class NestedAccountsUnsupportedError(IdlkitError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Nested accounts not supported: {name}")
        self.name = name


class MissingSignerError(IdlkitError):
    """A signer-flagged account has no keypair to sign with."""

    def __init__(self, name: str, pubkey: str) -> None:
        super().__init__(f"Account {name} ({pubkey}) must sign the transaction but no keypair was provided")
        self.name = name
        self.pubkey = pubkey


class InvalidKeyOrPathError(IdlkitError):
    def __init__(self, account: str, value: str) -> None:
        super().__init__(
            f"The provided argument for account: {account} is not a valid keyword, "
            f"keypair path or public key. \nProvided argument: {value}"
        )
        self.account = account
        self.value = value


class InstructionNotFoundError(IdlkitError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Instruction {name} not found")
        self.name = name


class DecodeError(IdlkitError):
    """Return data ended before the declared type was fully read."""


class IncompleteTransactionError(IdlkitError):
    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Transaction is missing required options: {', '.join(self.missing)}")


class RpcError(IdlkitError):
    """The RPC node rejected a request or returned an unusable response."""
