"""Download daily chart-result JSON for a ticker. Returns raw text for ingestion."""

from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from chart_trainer.core.errors import DataFetchError

logger = logging.getLogger("chart_trainer.utils.yahoo")

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"


def to_symbol(ticker: str, suffix: str = ".T") -> str:
    """Append the exchange suffix unless the ticker already carries one."""
    ticker = ticker.strip().upper()
    if not ticker:
        raise DataFetchError("Ticker is empty.")
    if "." in ticker or not suffix:
        return ticker
    return f"{ticker}{suffix}"


def fetch_chart_json(
    ticker: str,
    suffix: str = ".T",
    start: str = "2010-01-01",
    end: Optional[datetime] = None,
    timeout: float = 10.0,
) -> str:
    """Fetch daily bars from `start` to `end` (default now). Raises DataFetchError on failure."""
    symbol = to_symbol(ticker, suffix)
    period1 = int(datetime.strptime(start, "%Y-%m-%d").replace(tzinfo=timezone.utc).timestamp())
    period2 = int((end or datetime.now(timezone.utc)).timestamp())
    params = {"period1": period1, "period2": period2, "interval": "1d"}
    try:
        r = requests.get(
            CHART_URL.format(symbol=symbol),
            params=params,
            headers={"User-Agent": "Mozilla/5.0"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.warning("Chart fetch failed for %s: %s", symbol, e)
        raise DataFetchError(f"Could not download data for {symbol}.") from e
    if r.status_code == 404:
        raise DataFetchError(f"Ticker \"{symbol}\" was not found.")
    if r.status_code != 200:
        logger.warning("Chart fetch failed: %s %s", r.status_code, r.text[:200])
        raise DataFetchError(f"Data download failed for {symbol} (HTTP {r.status_code}).")
    logger.info("Fetched chart data for %s (%d bytes)", symbol, len(r.text))
    return r.text
