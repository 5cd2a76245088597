"""
Derived series over a Bar Series: moving average, weekly bars, RSI, MACD.
Every output is aligned to the input bars; None marks an undefined point.
"""

from __future__ import annotations
from datetime import timedelta
from typing import List, Optional

import numpy as np
import pandas as pd

from chart_trainer.core.types import Bar, LinePoint, MacdPoint


def _closes(bars: List[Bar]) -> pd.Series:
    return pd.Series([b.close for b in bars], dtype=float)


def _value(v: float) -> Optional[float]:
    """NaN and inf become the undefined marker."""
    if v is None or not np.isfinite(v):
        return None
    return float(v)


def calculate_ma(bars: List[Bar], period: int) -> List[LinePoint]:
    """Simple moving average of close, 2-decimal precision. Empty if fewer bars than period."""
    if period <= 0 or len(bars) < period:
        return []
    # Half-up to 2 decimals; Series.round would round halves to even
    ma = np.floor(_closes(bars).rolling(period).mean() * 100 + 0.5) / 100
    return [LinePoint(time=b.time, value=_value(v)) for b, v in zip(bars, ma)]


def generate_weekly_data(bars: List[Bar]) -> List[Bar]:
    """
    Aggregate daily bars into Sunday-start weeks.
    Weekly time is the last contributing day, not the week start.
    """
    if not bars:
        return []
    df = pd.DataFrame({
        "time": [b.time for b in bars],
        "open": [b.open for b in bars],
        "high": [b.high for b in bars],
        "low": [b.low for b in bars],
        "close": [b.close for b in bars],
        "volume": [b.volume or 0 for b in bars],
    })
    # date.weekday(): Monday=0 ... Sunday=6
    df["week"] = [t - timedelta(days=(t.weekday() + 1) % 7) for t in df["time"]]
    weekly = df.groupby("week", sort=True).agg(
        time=("time", "last"),
        open=("open", "first"),
        high=("high", "max"),
        low=("low", "min"),
        close=("close", "last"),
        volume=("volume", "sum"),
    )
    return [
        Bar(
            time=row.time,
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=int(row.volume),
        )
        for row in weekly.itertuples(index=False)
    ]


def calculate_rsi(bars: List[Bar], period: int = 14) -> List[LinePoint]:
    """
    RSI over close-to-close deltas with a rolling mean of gains and losses.
    Undefined for the first `period` bars. No losses in the window -> 100 (50 if flat).
    """
    if not bars or period <= 0:
        return []
    delta = _closes(bars).diff()
    up = delta.clip(lower=0).rolling(period).mean()
    down = (-delta).clip(lower=0).rolling(period).mean()
    rs = up / down.replace(0, np.nan)
    rsi = 100 - (100 / (1 + rs))
    rsi = rsi.mask((down == 0) & (up > 0), 100.0)
    rsi = rsi.mask((down == 0) & (up == 0), 50.0)
    return [LinePoint(time=b.time, value=_value(v)) for b, v in zip(bars, rsi)]


def calculate_macd(
    bars: List[Bar],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> List[MacdPoint]:
    """MACD line, signal line and histogram; each undefined until its EMA has enough history."""
    if not bars:
        return []
    close = _closes(bars)
    ema_fast = close.ewm(span=fast_period, adjust=False, min_periods=fast_period).mean()
    ema_slow = close.ewm(span=slow_period, adjust=False, min_periods=slow_period).mean()
    macd = ema_fast - ema_slow
    # Leading NaNs are skipped, so the signal EMA starts at the first MACD value
    signal = macd.ewm(span=signal_period, adjust=False, min_periods=signal_period).mean()
    hist = macd - signal
    return [
        MacdPoint(time=b.time, macd=_value(m), signal=_value(s), histogram=_value(h))
        for b, m, s, h in zip(bars, macd, signal, hist)
    ]
