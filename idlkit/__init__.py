"""idlkit: call Solana programs from their IDL."""

from .accounts import construct_instruction_accounts, read_keypair_file, write_keypair_file
from .borsh import decode_at_offset, decode_return_value, discriminator, encode_arguments
from .config import SolanaCliConfig, load_solana_cli_config
from .encode import construct_instruction_data
from .idl import Idl, IdlInstruction, find_instruction, load_idl
from .output import decode_instruction_return_data
from .transaction import SolanaTransaction, SolanaTransactionBuilder

__all__ = [
    "Idl",
    "IdlInstruction",
    "SolanaCliConfig",
    "SolanaTransaction",
    "SolanaTransactionBuilder",
    "construct_instruction_accounts",
    "construct_instruction_data",
    "decode_at_offset",
    "decode_instruction_return_data",
    "decode_return_value",
    "discriminator",
    "encode_arguments",
    "find_instruction",
    "load_idl",
    "load_solana_cli_config",
    "read_keypair_file",
    "write_keypair_file",
]
