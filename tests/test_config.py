import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from idlkit.config import SolanaCliConfig, default_config_path, load_solana_cli_config, normalize_to_url_if_moniker

SAMPLE_CONFIG = """---
json_rpc_url: "d"
websocket_url: ""
keypair_path: /tmp/keys/id.json
address_labels:
  "11111111111111111111111111111111": System Program
commitment: finalized
"""


class SolanaCliConfigTests(unittest.TestCase):
    def test_monikers(self) -> None:
        self.assertEqual(normalize_to_url_if_moniker("l"), "http://localhost:8899")
        self.assertEqual(normalize_to_url_if_moniker("devnet"), "https://api.devnet.solana.com")
        self.assertEqual(normalize_to_url_if_moniker("http://example:8899"), "http://example:8899")

    def test_load_config_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            path.write_text(SAMPLE_CONFIG)
            config = load_solana_cli_config(path)
        self.assertEqual(config.json_rpc_url, "d")
        self.assertEqual(config.rpc_url, "https://api.devnet.solana.com")
        self.assertEqual(config.keypair_path, "/tmp/keys/id.json")
        self.assertEqual(config.commitment, "finalized")
        self.assertEqual(config.source, str(path))

    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_solana_cli_config(Path(tmpdir) / "missing.yml")
        self.assertEqual(config, SolanaCliConfig())
        self.assertTrue(config.keypair_path.endswith(os.path.join(".config", "solana", "id.json")))
        self.assertIsNone(config.source)

    def test_config_path_from_environment(self) -> None:
        with patch.dict(os.environ, {"SOLANA_CONFIG": "/etc/solana.yml"}):
            self.assertEqual(default_config_path(), Path("/etc/solana.yml"))

    def test_tilde_keypair_path_is_expanded(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            path.write_text("keypair_path: ~/wallet.json\n")
            config = load_solana_cli_config(path)
        self.assertEqual(config.keypair_path, str(Path("~/wallet.json").expanduser()))


if __name__ == "__main__":
    unittest.main()
