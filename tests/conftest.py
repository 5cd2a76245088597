"""Shared fixtures: daily bar series built from closes."""

from datetime import date, timedelta

import pytest

from chart_trainer.core.types import Bar


def _make_bars(closes, start=date(2024, 1, 1), volume=100):
    """One bar per calendar day from `start`; open = previous close, high/low bracket both."""
    bars = []
    prev = closes[0]
    for i, c in enumerate(closes):
        o = prev
        bars.append(Bar(
            time=start + timedelta(days=i),
            open=float(o),
            high=float(max(o, c)) + 1.0,
            low=float(min(o, c)) - 1.0,
            close=float(c),
            volume=volume,
        ))
        prev = c
    return bars


@pytest.fixture
def make_bars():
    return _make_bars
