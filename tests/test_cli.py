"""Tests for the command-line entry point."""

import sys

import pytest

from arbwatch.cli import main

CONFIG = """
rpc_url_key = "TEST_RPC_URL"
database_url = "sqlite+aiosqlite:///{db}"

[venues]
venue_a_address = "0x1111111111111111111111111111111111111111"
venue_b_address = "0x2222222222222222222222222222222222222222"

[tokens]
base_token_address = "0x7ceb23fd6bc0add59e62ac25578270cff1b9f619"
quote_token_address = "0x2791bca1f2de4661ed88a30c99a7a9449aa84174"

[arbitrage]
trade_amount = "1.0"
profit_threshold = "10.0"
polling_interval_seconds = 10
"""


class TestMain:
    """Tests for main()."""

    def test_missing_config_exits_1(self, monkeypatch, capsys) -> None:
        """Test a configuration error stops the process before the loop."""
        monkeypatch.setattr(sys, "argv", ["arbwatch", "--once"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_unset_rpc_variable_exits_1(self, tmp_path, monkeypatch, capsys) -> None:
        """Test an unset RPC variable is fatal."""
        config = tmp_path / "config.toml"
        config.write_text(CONFIG.format(db=tmp_path / "opps.db"))
        monkeypatch.delenv("TEST_RPC_URL", raising=False)
        monkeypatch.setattr(sys, "argv", ["arbwatch", "--config", str(config), "--once"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "TEST_RPC_URL" in capsys.readouterr().err

    def test_history_on_empty_store(self, tmp_path, monkeypatch, capsys) -> None:
        """Test --history creates the store and reports it empty."""
        config = tmp_path / "config.toml"
        config.write_text(CONFIG.format(db=tmp_path / "opps.db"))
        monkeypatch.setattr(sys, "argv", ["arbwatch", "--config", str(config), "--history", "5"])

        main()

        assert "No opportunities recorded yet." in capsys.readouterr().out
        assert (tmp_path / "opps.db").exists()
