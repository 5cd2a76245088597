"""Unit tests for core.config."""

import os
from pathlib import Path

import pytest
from chart_trainer.core.config import Config, load_config

ENV_KEYS = ["LOT_SIZE", "RSI_PERIOD", "TICKER_SUFFIX", "LOG_LEVEL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    # load_dotenv writes straight to os.environ
    for key in ENV_KEYS:
        os.environ.pop(key, None)


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path / "missing.yaml", tmp_path)
    assert config.lot_size == 1.0
    assert config.ma_periods == [5, 10, 20, 50, 100]
    assert config.rsi_period == 14
    assert config.log_dir == Path("logs")


def test_yaml_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "chart:\n  lot_size: 10\n  visible_window: 50\n"
        "indicators:\n  ma_periods: [3, 7]\n  rsi_period: 9\n"
        "colors:\n  up: '#111111'\n",
        encoding="utf-8",
    )
    config = load_config(path, tmp_path)
    assert config.lot_size == 10
    assert config.visible_window == 50
    assert config.ma_periods == [3, 7]
    assert config.rsi_period == 9
    prefs = config.preferences()
    assert list(prefs.ma_configs) == ["3", "7"]
    assert prefs.rsi.period == 9
    assert prefs.up_color == "#111111"


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("indicators:\n  rsi_period: 9\n", encoding="utf-8")
    monkeypatch.setenv("LOT_SIZE", "2.5")
    monkeypatch.setenv("RSI_PERIOD", "not-a-number")
    monkeypatch.setenv("TICKER_SUFFIX", ".L")
    config = load_config(path, tmp_path)
    assert config.lot_size == 2.5
    assert config.rsi_period == 9
    assert config.ticker_suffix == ".L"


def test_dotenv_file_loaded(tmp_path):
    (tmp_path / ".env").write_text("LOG_LEVEL=DEBUG\n", encoding="utf-8")
    config = load_config(tmp_path / "config.yaml", tmp_path)
    assert config.log_level == "DEBUG"


def test_config_direct():
    config = Config(ma_periods=None)
    assert config.ma_periods == [5, 10, 20, 50, 100]
