"""CLI entrypoint for idlkit."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from .config import load_solana_cli_config
from .constants import TARGET_SOLANA
from .deploy import deploy_program
from .idl import load_idl
from .output import print_idl_instruction_info, print_transaction_information
from .project import check_target_match
from .transaction import SolanaTransaction


def _cmd_call(args: argparse.Namespace) -> int:
    if not check_target_match(TARGET_SOLANA):
        return 1
    config = load_solana_cli_config(args.config)
    payer = args.payer or config.keypair_path

    transaction = (
        SolanaTransaction.new()
        .rpc_url(config.rpc_url)
        .idl(args.idl)
        .program_id(args.program)
        .instruction(args.instruction)
        .call_data(args.data)
        .accounts(args.accounts)
        .payer(payer)
        .config(config)
        .done()
    )
    signature = transaction.submit()
    print_transaction_information(
        transaction.fetch(signature),
        signature,
        transaction.instruction,
        transaction.idl.types,
        transaction.new_accounts,
        args.output_json,
    )
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    if not check_target_match(TARGET_SOLANA):
        return 1
    idl = load_idl(args.idl)
    print_idl_instruction_info(idl, args.instruction, args.output_json)
    return 0


def _cmd_deploy(args: argparse.Namespace) -> int:
    if not check_target_match(TARGET_SOLANA):
        return 1
    config = load_solana_cli_config(args.config)
    program_id = deploy_program(args.program_location, config)
    if args.output_json:
        print(json.dumps({"program_id": program_id}))
    else:
        print(f"Program ID: {program_id}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]),
        description="Interact with Solana programs described by an IDL JSON file",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", help="Solana CLI config file (default: $SOLANA_CONFIG or ~/.config/solana/cli/config.yml)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_call = sub.add_parser("call", help="Send a custom transaction to a Solana program")
    p_call.add_argument("--idl", required=True, help="Path of the IDL JSON file")
    p_call.add_argument("--program", required=True, help="Program ID of the deployed program")
    p_call.add_argument("--instruction", required=True, help="Name of the instruction to call")
    p_call.add_argument(
        "--data",
        nargs="*",
        default=[],
        help=(
            "Data arguments for the instruction. Arrays and vectors take a comma-separated "
            "list (1,2,3,4); structs take a JSON object or a path to a JSON file"
        ),
    )
    p_call.add_argument(
        "--accounts",
        nargs="*",
        default=[],
        help=(
            "Account arguments for the instruction. Keywords: new (create a new account), "
            "self (default keypair from the Solana CLI config), system (system program ID)"
        ),
    )
    p_call.add_argument("--payer", help="Payer keypair path (default: keypair_path from the Solana CLI config)")
    p_call.add_argument("--output-json", action="store_true", help="Print the result as JSON")
    p_call.set_defaults(func=_cmd_call)

    p_show = sub.add_parser("show", help="Show a program's instructions from its IDL JSON file")
    p_show.add_argument("--idl", required=True, help="Path of the IDL JSON file")
    p_show.add_argument("--instruction", help="Instruction to show (default: all)")
    p_show.add_argument("--output-json", action="store_true", help="Print the result as JSON")
    p_show.set_defaults(func=_cmd_show)

    p_deploy = sub.add_parser("deploy", help="Deploy a program to Solana")
    p_deploy.add_argument("program_location", help="Path to the program file to deploy (.so)")
    p_deploy.add_argument("--output-json", action="store_true", help="Print the result as JSON")
    p_deploy.set_defaults(func=_cmd_deploy)

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except FileNotFoundError as exc:
        print(str(exc))
        return 1
    except (ValueError, RuntimeError) as exc:
        print(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
