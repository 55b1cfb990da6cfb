"""Account resolution for IDL instructions.

Each account declared by an instruction consumes one raw string, which is
either a keyword or a key:

- ``new``: generate a keypair and write it to ``<account>-<pubkey>.json``,
- ``self``: the keypair named by the Solana CLI config (``keypair_path``),
- ``system``: the system program id (never a signer),
- otherwise a keypair file path, falling back to a base58 public key.

Signer and writable flags always come from the IDL, never from the input.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from solders.instruction import AccountMeta
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID

from .config import SolanaCliConfig
from .constants import KEYWORD_NEW, KEYWORD_SELF, KEYWORD_SYSTEM
from .errors import (
    FileError,
    InvalidKeyOrPathError,
    MissingAccountError,
    NestedAccountsUnsupportedError,
)
from .idl import IdlAccounts, IdlInstruction

logger = logging.getLogger(__name__)

NewAccount = Tuple[Pubkey, str]


def read_keypair_file(path: str | Path) -> Keypair:
    """Read a Solana CLI keypair file (JSON array of 64 bytes)."""
    resolved = Path(path).expanduser()
    try:
        raw = json.loads(resolved.read_text())
    except (OSError, ValueError) as exc:
        raise FileError(str(resolved), exc) from exc
    if not isinstance(raw, list) or not all(isinstance(b, int) for b in raw):
        raise FileError(str(resolved), "keypair file must be a JSON array of bytes")
    try:
        return Keypair.from_bytes(bytes(raw))
    except ValueError as exc:
        raise FileError(str(resolved), exc) from exc


def write_keypair_file(keypair: Keypair, path: str | Path) -> None:
    try:
        Path(path).write_text(json.dumps(list(bytes(keypair))))
    except OSError as exc:
        raise FileError(str(path), f"couldn't write keypair file to disk: {exc}") from exc


def _resolve_key_or_path(account_name: str, raw: str) -> Tuple[Optional[Keypair], Pubkey]:
    try:
        keypair = read_keypair_file(raw)
    except FileError:
        pass
    else:
        return keypair, keypair.pubkey()
    try:
        return None, Pubkey.from_string(raw)
    except ValueError as exc:
        raise InvalidKeyOrPathError(account_name, raw) from exc


def construct_instruction_accounts(
    instruction: IdlInstruction,
    raw_accounts: Sequence[str],
    config: Optional[SolanaCliConfig] = None,
    keypair_dir: str | Path | None = None,
) -> Tuple[List[AccountMeta], List[Keypair], List[NewAccount]]:
    """Resolve ``raw_accounts`` against the instruction's declared accounts.

    Returns the account metas in declaration order, the signers (one per
    signer-flagged account) and the ``(pubkey, keypair file)`` pairs of
    accounts created for the ``new`` keyword.
    """
    accounts: List[AccountMeta] = []
    signers: List[Keypair] = []
    new_accounts: List[NewAccount] = []

    for i, account in enumerate(instruction.accounts):
        if isinstance(account, IdlAccounts):
            raise NestedAccountsUnsupportedError(account.name)
        if i >= len(raw_accounts):
            raise MissingAccountError(account.name)
        raw = raw_accounts[i]
        needs_signer = account.is_signer

        if raw == KEYWORD_NEW:
            keypair: Optional[Keypair] = Keypair()
            pubkey = keypair.pubkey()
            filename = f"{account.name}-{pubkey}.json"
            keypair_path = str(Path(keypair_dir) / filename) if keypair_dir is not None else filename
            write_keypair_file(keypair, keypair_path)
            new_accounts.append((pubkey, keypair_path))
            logger.info("created account %s (%s) -> %s", account.name, pubkey, keypair_path)
        elif raw == KEYWORD_SELF:
            cfg = config if config is not None else SolanaCliConfig()
            keypair = read_keypair_file(cfg.keypair_path)
            pubkey = keypair.pubkey()
        elif raw == KEYWORD_SYSTEM:
            keypair = None
            pubkey = SYSTEM_PROGRAM_ID
            needs_signer = False
        else:
            keypair, pubkey = _resolve_key_or_path(account.name, raw)

        if needs_signer:
            if keypair is None:
                raise InvalidKeyOrPathError(account.name, raw)
            signers.append(keypair)
        logger.debug(
            "account %s -> %s (signer=%s, writable=%s)", account.name, pubkey, account.is_signer, account.is_mut
        )
        accounts.append(AccountMeta(pubkey=pubkey, is_signer=account.is_signer, is_writable=account.is_mut))

    return accounts, signers, new_accounts
