"""Tests for quantmind.config — environment variable loading and validation."""

import os

import pytest

from quantmind.config import load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Ensure QuantMind env vars are cleared between tests."""
    for var in [
        "MARKET_DATA_URL",
        "MARKET_DATA_TOKEN",
        "HISTORY_DAYS",
        "DEFAULT_HORIZON_DAYS",
        "BAND_COEFFICIENT",
        "RSI_PERIOD",
        "RSI_LOSS_FLOOR",
        "LOG_LEVEL",
        "API_PORT",
    ]:
        monkeypatch.delenv(var, raising=False)


def _set_required(monkeypatch):
    monkeypatch.setenv("MARKET_DATA_URL", "https://data.example.test/")


class TestLoadConfig:
    def test_loads_required_vars(self, monkeypatch, tmp_path):
        _set_required(monkeypatch)
        cfg = load_config(env_path=str(tmp_path / "nonexistent.env"))
        assert cfg.market_data_url == "https://data.example.test/"
        assert cfg.market_data_base_url == "https://data.example.test"

    def test_defaults(self, monkeypatch, tmp_path):
        _set_required(monkeypatch)
        cfg = load_config(env_path=str(tmp_path / "nonexistent.env"))
        assert cfg.market_data_token == ""
        assert cfg.history_days == 60
        assert cfg.default_horizon_days == 3
        assert cfg.band_coefficient == 0.01
        assert cfg.rsi_period == 14
        assert cfg.rsi_loss_floor is None
        assert cfg.log_level == "INFO"
        assert cfg.api_port == 8080

    def test_overrides(self, monkeypatch, tmp_path):
        _set_required(monkeypatch)
        monkeypatch.setenv("BAND_COEFFICIENT", "0.02")
        monkeypatch.setenv("RSI_LOSS_FLOOR", "1")
        monkeypatch.setenv("DEFAULT_HORIZON_DAYS", "7")
        cfg = load_config(env_path=str(tmp_path / "nonexistent.env"))
        assert cfg.band_coefficient == 0.02
        assert cfg.rsi_loss_floor == 1.0
        assert cfg.default_horizon_days == 7

    def test_config_missing_var(self, tmp_path):
        # Use a non-existent env_path so load_dotenv doesn't re-populate
        # from a real .env file
        with pytest.raises(ValueError, match="MARKET_DATA_URL"):
            load_config(env_path=str(tmp_path / "nonexistent.env"))

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("MARKET_DATA_URL=https://file.example.test\nHISTORY_DAYS=90\n")
        try:
            cfg = load_config(env_path=str(env_file))
            assert cfg.market_data_url == "https://file.example.test"
            assert cfg.history_days == 90
        finally:
            os.environ.pop("MARKET_DATA_URL", None)
            os.environ.pop("HISTORY_DAYS", None)
