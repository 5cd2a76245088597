"""
Display preferences: indicator visibility, periods and candle colors.
Pure functions; no effect on trading state, preserved across data loads.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

DEFAULT_MA_COLORS = ["#FF5252", "#4CAF50", "#2196F3", "#9C27B0", "#FF9800"]
COLOR_TARGETS = ("up_color", "down_color")


@dataclass(frozen=True)
class MAConfig:
    period: int
    color: str
    visible: bool = True


@dataclass(frozen=True)
class RSIConfig:
    visible: bool = False
    period: int = 14


@dataclass(frozen=True)
class MACDConfig:
    visible: bool = False
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9


@dataclass(frozen=True)
class DisplayPreferences:
    ma_configs: Dict[str, MAConfig] = field(default_factory=dict)
    rsi: RSIConfig = RSIConfig()
    macd: MACDConfig = MACDConfig()
    volume_visible: bool = True
    show_weekly: bool = False
    up_color: str = "#ef5350"
    down_color: str = "#26a69a"


def default_preferences(
    ma_periods: Optional[List[int]] = None,
    rsi_period: int = 14,
    macd_fast: int = 12,
    macd_slow: int = 26,
    macd_signal: int = 9,
    up_color: str = "#ef5350",
    down_color: str = "#26a69a",
) -> DisplayPreferences:
    """MA lines keyed by their period as a string, colors cycled from the default palette."""
    periods = ma_periods if ma_periods is not None else [5, 10, 20, 50, 100]
    ma_configs = {
        str(p): MAConfig(period=p, color=DEFAULT_MA_COLORS[i % len(DEFAULT_MA_COLORS)])
        for i, p in enumerate(periods)
    }
    return DisplayPreferences(
        ma_configs=ma_configs,
        rsi=RSIConfig(period=rsi_period),
        macd=MACDConfig(fast_period=macd_fast, slow_period=macd_slow, signal_period=macd_signal),
        up_color=up_color,
        down_color=down_color,
    )


def toggle_ma(prefs: DisplayPreferences, ma_id: str) -> DisplayPreferences:
    """Flip one MA line. Unknown id leaves prefs unchanged."""
    cfg = prefs.ma_configs.get(ma_id)
    if cfg is None:
        return prefs
    configs = dict(prefs.ma_configs)
    configs[ma_id] = replace(cfg, visible=not cfg.visible)
    return replace(prefs, ma_configs=configs)


def toggle_rsi(prefs: DisplayPreferences) -> DisplayPreferences:
    return replace(prefs, rsi=replace(prefs.rsi, visible=not prefs.rsi.visible))


def toggle_macd(prefs: DisplayPreferences) -> DisplayPreferences:
    return replace(prefs, macd=replace(prefs.macd, visible=not prefs.macd.visible))


def toggle_volume(prefs: DisplayPreferences) -> DisplayPreferences:
    return replace(prefs, volume_visible=not prefs.volume_visible)


def toggle_weekly(prefs: DisplayPreferences) -> DisplayPreferences:
    return replace(prefs, show_weekly=not prefs.show_weekly)


def set_candle_color(prefs: DisplayPreferences, target: str, color: str) -> DisplayPreferences:
    if target not in COLOR_TARGETS:
        raise ValueError(f"Unknown color target: {target}")
    return replace(prefs, **{target: color})


def reset_premium_features(prefs: DisplayPreferences) -> DisplayPreferences:
    """Hide RSI and MACD (premium-only panes)."""
    return replace(
        prefs,
        rsi=replace(prefs.rsi, visible=False),
        macd=replace(prefs.macd, visible=False),
    )
