"""Building and submitting IDL instruction calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solana.rpc.core import RPCException, TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.errors import SignerError
from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from .accounts import NewAccount, construct_instruction_accounts, read_keypair_file
from .config import SolanaCliConfig
from .encode import construct_instruction_data
from .errors import IdlkitError, IncompleteTransactionError, MissingSignerError, RpcError
from .idl import Idl, IdlInstruction, find_instruction, load_idl

logger = logging.getLogger(__name__)

_RPC_ERRORS = (
    RPCException,
    SolanaRpcException,
    UnconfirmedTxError,
    TransactionExpiredBlockheightExceededError,
    httpx.HTTPError,
)


@dataclass
class SolanaTransaction:
    client: Client
    idl: Idl
    program_id: Pubkey
    instruction: IdlInstruction
    call_data: bytes
    accounts: List[AccountMeta]
    signers: List[Keypair]
    new_accounts: List[NewAccount]
    payer: Keypair

    @staticmethod
    def new() -> "SolanaTransactionBuilder":
        return SolanaTransactionBuilder()

    def build_instruction(self) -> Instruction:
        return Instruction(self.program_id, self.call_data, self.accounts)

    def _signing_keypairs(self) -> List[Keypair]:
        keypairs: List[Keypair] = []
        seen = set()
        for keypair in [self.payer, *self.signers]:
            pubkey = keypair.pubkey()
            if pubkey in seen:
                continue
            seen.add(pubkey)
            keypairs.append(keypair)
        return keypairs

    def _check_signers(self, keypairs: List[Keypair]) -> None:
        available = {keypair.pubkey() for keypair in keypairs}
        for account, meta in zip(self.instruction.accounts, self.accounts):
            if meta.is_signer and meta.pubkey not in available:
                raise MissingSignerError(account.name, str(meta.pubkey))

    def submit(self) -> Signature:
        keypairs = self._signing_keypairs()
        self._check_signers(keypairs)
        tx = Transaction.new_with_payer([self.build_instruction()], self.payer.pubkey())
        try:
            blockhash = self.client.get_latest_blockhash().value.blockhash
            tx.sign(keypairs, blockhash)
            logger.debug("sending %s to %s", self.instruction.name, self.program_id)
            sig = self.client.send_raw_transaction(
                bytes(tx),
                opts=TxOpts(skip_preflight=False, preflight_commitment=Confirmed),
            ).value
            self.client.confirm_transaction(sig, commitment=Confirmed)
        except _RPC_ERRORS as exc:
            raise RpcError(f"Error: {exc}") from exc
        except SignerError as exc:
            raise RpcError(f"Error signing transaction: {exc}") from exc
        logger.info("transaction confirmed: %s", sig)
        return sig

    def fetch(self, signature: Signature) -> Any:
        try:
            resp = self.client.get_transaction(
                signature,
                encoding="json",
                commitment=Confirmed,
                max_supported_transaction_version=0,
            )
        except _RPC_ERRORS as exc:
            raise RpcError(f"Error: {exc}") from exc
        if resp.value is None:
            raise RpcError(f"transaction {signature} not found")
        return resp.value


class SolanaTransactionBuilder:
    """Collects call options; ``done()`` checks that every required one is set.

    Required: rpc_url, idl, program_id, instruction, call_data, accounts, payer.
    Optional: config (used by the ``self`` account keyword), keypair_dir and
    client (an already constructed RPC client).
    """

    REQUIRED = ("rpc_url", "idl", "program_id", "instruction", "call_data", "accounts", "payer")

    def __init__(self) -> None:
        self._opts: Dict[str, Any] = {}
        self._config: Optional[SolanaCliConfig] = None
        self._keypair_dir: Optional[Path] = None
        self._client: Optional[Client] = None

    def _set(self, key: str, value: Any) -> "SolanaTransactionBuilder":
        if key in self._opts:
            raise IdlkitError(f"{key} is already set")
        self._opts[key] = value
        return self

    def rpc_url(self, rpc_url: str) -> "SolanaTransactionBuilder":
        return self._set("rpc_url", rpc_url)

    def idl(self, idl: str | Path) -> "SolanaTransactionBuilder":
        return self._set("idl", idl)

    def program_id(self, program_id: str) -> "SolanaTransactionBuilder":
        return self._set("program_id", program_id)

    def instruction(self, instruction: str) -> "SolanaTransactionBuilder":
        return self._set("instruction", instruction)

    def call_data(self, call_data: Sequence[str]) -> "SolanaTransactionBuilder":
        return self._set("call_data", [str(item) for item in call_data])

    def accounts(self, accounts: Sequence[str]) -> "SolanaTransactionBuilder":
        return self._set("accounts", [str(item) for item in accounts])

    def payer(self, payer: str | Path) -> "SolanaTransactionBuilder":
        return self._set("payer", payer)

    def config(self, config: SolanaCliConfig) -> "SolanaTransactionBuilder":
        self._config = config
        return self

    def keypair_dir(self, keypair_dir: str | Path) -> "SolanaTransactionBuilder":
        self._keypair_dir = Path(keypair_dir)
        return self

    def client(self, client: Client) -> "SolanaTransactionBuilder":
        self._client = client
        return self

    def done(self) -> SolanaTransaction:
        missing = [key for key in self.REQUIRED if key not in self._opts]
        if missing:
            raise IncompleteTransactionError(missing)
        opts = self._opts

        idl = load_idl(opts["idl"])
        try:
            program_id = Pubkey.from_string(opts["program_id"])
        except ValueError as exc:
            raise IdlkitError(f"Error getting program ID: {exc}") from exc
        instruction = find_instruction(idl, opts["instruction"])
        payer = read_keypair_file(opts["payer"])

        call_data = construct_instruction_data(instruction, opts["call_data"], idl.types)
        accounts, signers, new_accounts = construct_instruction_accounts(
            instruction,
            opts["accounts"],
            config=self._config,
            keypair_dir=self._keypair_dir,
        )

        client = self._client if self._client is not None else Client(opts["rpc_url"], commitment=Confirmed)
        return SolanaTransaction(
            client=client,
            idl=idl,
            program_id=program_id,
            instruction=instruction,
            call_data=call_data,
            accounts=accounts,
            signers=signers,
            new_accounts=new_accounts,
            payer=payer,
        )
