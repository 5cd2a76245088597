"""
Load configuration from config.yaml and .env. Env vars override the file.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, List, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_MA_PERIODS = [5, 10, 20, 50, 100]


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default).strip()

    def env_int(key: str, default: int = 0) -> int:
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    def env_float(key: str, default: float = 0.0) -> float:
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    chart = data.get("chart", {})
    indicators = data.get("indicators", {})
    colors = data.get("colors", {})
    market = data.get("data", {})
    logging_cfg = data.get("logging", {})

    return Config(
        # Replay
        lot_size=env_float("LOT_SIZE", chart.get("lot_size", 1.0)),
        visible_window=int(chart.get("visible_window", 100)),
        # Indicators
        ma_periods=[int(p) for p in indicators.get("ma_periods", DEFAULT_MA_PERIODS)],
        rsi_period=env_int("RSI_PERIOD", indicators.get("rsi_period", 14)),
        macd_fast=int(indicators.get("macd_fast", 12)),
        macd_slow=int(indicators.get("macd_slow", 26)),
        macd_signal=int(indicators.get("macd_signal", 9)),
        # Candle colors
        up_color=colors.get("up", "#ef5350"),
        down_color=colors.get("down", "#26a69a"),
        # Market data fetch
        ticker_suffix=env("TICKER_SUFFIX", market.get("ticker_suffix", ".T")),
        data_start_date=str(market.get("start_date", "2010-01-01")),
        fetch_timeout_s=float(market.get("timeout_s", 10.0)),
        # Logging
        log_level=env("LOG_LEVEL", logging_cfg.get("level", "INFO")),
        log_dir=Path(logging_cfg.get("log_dir", "logs")),
        log_file=logging_cfg.get("log_file", "chart_trainer.log"),
    )


class Config:
    """Unified configuration. Immutable after load."""

    __slots__ = (
        "lot_size", "visible_window",
        "ma_periods", "rsi_period", "macd_fast", "macd_slow", "macd_signal",
        "up_color", "down_color",
        "ticker_suffix", "data_start_date", "fetch_timeout_s",
        "log_level", "log_dir", "log_file",
    )

    def __init__(
        self,
        lot_size: float = 1.0,
        visible_window: int = 100,
        ma_periods: Optional[List[int]] = None,
        rsi_period: int = 14,
        macd_fast: int = 12,
        macd_slow: int = 26,
        macd_signal: int = 9,
        up_color: str = "#ef5350",
        down_color: str = "#26a69a",
        ticker_suffix: str = ".T",
        data_start_date: str = "2010-01-01",
        fetch_timeout_s: float = 10.0,
        log_level: str = "INFO",
        log_dir: Path = None,
        log_file: str = "chart_trainer.log",
    ):
        self.lot_size = lot_size
        self.visible_window = visible_window
        self.ma_periods = list(ma_periods) if ma_periods else list(DEFAULT_MA_PERIODS)
        self.rsi_period = rsi_period
        self.macd_fast = macd_fast
        self.macd_slow = macd_slow
        self.macd_signal = macd_signal
        self.up_color = up_color
        self.down_color = down_color
        self.ticker_suffix = ticker_suffix
        self.data_start_date = data_start_date
        self.fetch_timeout_s = fetch_timeout_s
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file

    def preferences(self):
        """Initial DisplayPreferences built from this config."""
        from chart_trainer.replay.preferences import default_preferences

        return default_preferences(
            ma_periods=self.ma_periods,
            rsi_period=self.rsi_period,
            macd_fast=self.macd_fast,
            macd_slow=self.macd_slow,
            macd_signal=self.macd_signal,
            up_color=self.up_color,
            down_color=self.down_color,
        )
