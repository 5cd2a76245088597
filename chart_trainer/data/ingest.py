"""
Market data ingestion: chart-result JSON or delimited text -> Bar Series.

Output bars have unique, strictly increasing dates. Unusable rows are
dropped silently; a payload with no usable rows raises EmptySeries.
"""

from __future__ import annotations
import io
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from chart_trainer.core.errors import EmptySeries, MalformedInput
from chart_trainer.core.types import Bar

PRICE_COLUMNS = ["open", "high", "low", "close"]
REQUIRED_COLUMNS = ["date"] + PRICE_COLUMNS
DELIMITERS = [",", "\t", ";"]
# UNIX seconds of 0001-01-01 and 9999-12-31T23:59:59, the range a date can hold
MIN_TIMESTAMP = -62135596800
MAX_TIMESTAMP = 253402300799


@dataclass
class MarketData:
    """Parsed bars plus the chart-result meta block (empty for text input)."""
    bars: List[Bar]
    meta: Dict[str, Any] = field(default_factory=dict)


def parse_stock_data(text: str) -> MarketData:
    """Sniff the payload shape and parse it. JSON if it starts with '{'."""
    if text.lstrip().startswith("{"):
        return parse_chart_json(text)
    return MarketData(bars=parse_csv(text))


def parse_chart_json(text: str) -> MarketData:
    """
    Parse a chart-result payload:
    chart.result[0].timestamp (UNIX seconds) + chart.result[0].indicators.quote[0] arrays.
    A row with any null value is dropped.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInput(f"Invalid JSON: {e}") from e
    if not isinstance(payload, dict) or not isinstance(payload.get("chart"), dict):
        raise MalformedInput("Invalid data format: 'chart' object is missing.")
    chart = payload["chart"]
    if chart.get("error"):
        error = chart["error"]
        description = error.get("description", error) if isinstance(error, dict) else error
        raise MalformedInput(f"Chart data error: {description}")
    results = chart.get("result")
    if not results:
        raise MalformedInput("No chart data found in the payload.")
    try:
        result = results[0]
        timestamps = result.get("timestamp")
        quote = result["indicators"]["quote"][0]
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise MalformedInput("Invalid data format: timestamps or quotes are missing.") from e
    if not timestamps or not isinstance(quote, dict):
        raise MalformedInput("Invalid data format: timestamps or quotes are missing.")
    missing = [c for c in PRICE_COLUMNS + ["volume"] if c not in quote]
    if missing:
        raise MalformedInput(f"Invalid data format: quote fields missing: {', '.join(missing)}")

    df = pd.DataFrame({"ts": pd.Series(timestamps, dtype=object)})
    for col in PRICE_COLUMNS + ["volume"]:
        df[col] = pd.to_numeric(pd.Series(quote[col], dtype=object), errors="coerce")
    ts = pd.to_numeric(df["ts"], errors="coerce")
    ts = ts.where(ts.between(MIN_TIMESTAMP, MAX_TIMESTAMP))
    df["time"] = pd.to_datetime(ts, unit="s", utc=True, errors="coerce").dt.tz_localize(None).dt.normalize()
    meta = result.get("meta") or {}
    return MarketData(bars=_normalize(df), meta=meta if isinstance(meta, dict) else {})


def parse_csv(text: str) -> List[Bar]:
    """
    Parse delimited text with a header row naming date,open,high,low,close[,volume]
    in any order (case-insensitive). Dates must be YYYY-MM-DD.
    """
    header = next((line for line in text.splitlines() if line.strip()), None)
    if header is None:
        raise MalformedInput("Empty input: no header row.")
    delimiter = next((d for d in DELIMITERS if d in header), ",")
    try:
        df = pd.read_csv(io.StringIO(text), sep=delimiter, dtype=str, skipinitialspace=True)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise MalformedInput(f"Could not parse delimited text: {e}") from e
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise MalformedInput(f"Required columns missing: {', '.join(missing)}")

    out = pd.DataFrame({
        "time": pd.to_datetime(df["date"].str.strip(), format="%Y-%m-%d", errors="coerce"),
    })
    for col in PRICE_COLUMNS:
        out[col] = pd.to_numeric(df[col].str.strip(), errors="coerce")
    if "volume" in df.columns:
        out["volume"] = pd.to_numeric(df["volume"].str.strip(), errors="coerce")
    else:
        out["volume"] = 0.0
    return _normalize(out)


def _normalize(df: pd.DataFrame) -> List[Bar]:
    """Drop unusable rows, collapse duplicate dates (last wins), sort ascending."""
    cols = PRICE_COLUMNS + ["volume"]
    df = df.dropna(subset=["time"] + cols)
    values = df[cols].to_numpy(dtype=float)
    usable = np.isfinite(values).all(axis=1)
    usable &= df["volume"].to_numpy(dtype=float) >= 0
    lo = df[["open", "close"]].min(axis=1)
    hi = df[["open", "close"]].max(axis=1)
    usable &= ((df["low"] <= lo) & (hi <= df["high"])).to_numpy()
    df = df[usable]
    df = df.drop_duplicates(subset="time", keep="last").sort_values("time")
    if df.empty:
        raise EmptySeries("No usable data rows found.")
    return [
        Bar(
            time=row.time.date(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=int(round(row.volume)),
        )
        for row in df.itertuples(index=False)
    ]


def chart_title(meta: Dict[str, Any], fallback: str) -> str:
    """'<longName> (<symbol>)' when the meta block names the instrument, else fallback."""
    long_name = meta.get("longName") if meta else None
    if long_name:
        symbol = meta.get("symbol")
        return f"{long_name} ({symbol})" if symbol else str(long_name)
    return fallback
