"""Solana CLI configuration lookup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .constants import (
    CLUSTER_URLS,
    DEFAULT_COMMITMENT,
    DEFAULT_CONFIG_PATH,
    DEFAULT_KEYPAIR_PATH,
    DEFAULT_RPC_URL,
    DEFAULT_WEBSOCKET_URL,
)

logger = logging.getLogger(__name__)


def _default_keypair_path() -> str:
    return str(Path(*DEFAULT_KEYPAIR_PATH).expanduser())


@dataclass
class SolanaCliConfig:
    json_rpc_url: str = DEFAULT_RPC_URL
    websocket_url: str = DEFAULT_WEBSOCKET_URL
    keypair_path: str = field(default_factory=_default_keypair_path)
    commitment: str = DEFAULT_COMMITMENT
    source: Optional[str] = None

    @property
    def rpc_url(self) -> str:
        return normalize_to_url_if_moniker(self.json_rpc_url)


def normalize_to_url_if_moniker(url_or_moniker: str) -> str:
    return CLUSTER_URLS.get(url_or_moniker, url_or_moniker)


def default_config_path() -> Path:
    path = os.environ.get("SOLANA_CONFIG") or os.environ.get("SOLANA_CONFIG_FILE")
    if path:
        return Path(path).expanduser()
    return Path(*DEFAULT_CONFIG_PATH).expanduser()


def _read_config_lines(text: str) -> Dict[str, str]:
    cfg: Dict[str, str] = {}
    for line in text.splitlines():
        # Nested maps (address_labels) are indented; only top-level keys matter.
        if not line or line[0].isspace():
            continue
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("---"):
            continue
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        value = value.strip().strip("\"'")
        if key:
            cfg[key] = value
    return cfg


def load_solana_cli_config(path: str | Path | None = None) -> SolanaCliConfig:
    """Load the Solana CLI config; a missing file yields the CLI defaults."""
    cfg_path = Path(path).expanduser() if path is not None else default_config_path()
    try:
        text = cfg_path.read_text()
    except OSError:
        logger.debug("no solana config at %s, using defaults", cfg_path)
        return SolanaCliConfig()
    values = _read_config_lines(text)
    config = SolanaCliConfig(source=str(cfg_path))
    if values.get("json_rpc_url"):
        config.json_rpc_url = values["json_rpc_url"]
    if values.get("websocket_url"):
        config.websocket_url = values["websocket_url"]
    if values.get("keypair_path"):
        config.keypair_path = str(Path(values["keypair_path"]).expanduser())
    if values.get("commitment"):
        config.commitment = values["commitment"]
    logger.debug("loaded solana config from %s", cfg_path)
    return config
