"""Program deployment through the Solana CLI."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path

from .config import SolanaCliConfig

logger = logging.getLogger(__name__)


def _program_id_from_output(stdout: str) -> str:
    text = stdout.strip()
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        program_id = parsed.get("programId")
        if isinstance(program_id, str) and program_id:
            return program_id
    # Display output: "Program Id: <base58>"
    for line in text.splitlines():
        if line.strip().startswith("Program Id:"):
            parts = line.split()
            if len(parts) >= 3:
                return parts[2]
    raise RuntimeError(f"Failed to get program ID from result: {text}")


def deploy_program(program_location: str | Path, config: SolanaCliConfig) -> str:
    """Deploy ``program_location`` (.so) with the configured payer; returns the program id."""
    if not Path(program_location).exists():
        raise FileNotFoundError(f"Program not found: {program_location}")
    cmd = [
        "solana",
        "program",
        "deploy",
        "--output",
        "json-compact",
        "--url",
        config.rpc_url,
        "--keypair",
        config.keypair_path,
        "--commitment",
        config.commitment,
        str(program_location),
    ]
    logger.debug("running %s", " ".join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        msg = result.stderr.strip() or result.stdout.strip() or "solana program deploy failed"
        raise RuntimeError(f"Failed to process deployment command: {msg}")
    return _program_id_from_output(result.stdout)
