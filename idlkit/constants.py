"""idlkit constants."""

# Instruction discriminators are sha256("global:<name>")[:8].
GLOBAL_NAMESPACE = "global"
DISCRIMINATOR_SIZE = 8

INT_WIDTHS = (8, 16, 32, 64, 128, 256)
FLOAT_WIDTHS = (32, 64)
PUBKEY_SIZE = 32
LENGTH_PREFIX_SIZE = 4

# Account keywords accepted by the resolver.
KEYWORD_NEW = "new"
KEYWORD_SELF = "self"
KEYWORD_SYSTEM = "system"

# Solana CLI defaults (mirrors `solana config get` on a fresh install).
DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_WEBSOCKET_URL = ""
DEFAULT_COMMITMENT = "confirmed"
DEFAULT_CONFIG_PATH = ("~", ".config", "solana", "cli", "config.yml")
DEFAULT_KEYPAIR_PATH = ("~", ".config", "solana", "id.json")

CLUSTER_URLS = {
    "m": "https://api.mainnet-beta.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
    "t": "https://api.testnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "d": "https://api.devnet.solana.com",
    "devnet": "https://api.devnet.solana.com",
    "l": "http://localhost:8899",
    "localhost": "http://localhost:8899",
}

PROJECT_MANIFEST = "solang.toml"
TARGET_SOLANA = "solana"

RETURN_LOG_PREFIX = "Program return:"
