"""Unit tests for analytics.metrics."""

from datetime import date

import pytest
from chart_trainer.analytics.metrics import (
    win_rate,
    profit_factor,
    expectancy,
    max_drawdown,
    compute_trade_stats,
)
from chart_trainer.core.types import Direction, Trade


def _trade(profit, i=0):
    return Trade(
        id=f"L{i}",
        direction=Direction.LONG,
        entry_price=100.0,
        exit_price=100.0 + profit,
        size=1.0,
        entry_date=date(2024, 1, 1),
        exit_date=date(2024, 1, 2),
        profit=profit,
    )


def test_win_rate():
    assert win_rate([1, -1, 1, 1]) == 0.75
    assert win_rate([]) == 0.0


def test_profit_factor():
    assert profit_factor([10, -5, 10, -5]) == 2.0
    assert profit_factor([10, 10]) == float("inf")
    assert profit_factor([-5, -5]) == 0.0


def test_expectancy():
    assert expectancy([10, -5, 5]) == pytest.approx(10 / 3)
    assert expectancy([]) == 0.0


def test_max_drawdown():
    # cumulative 0 -> 5 -> 2 -> 4 -> -1  =>  peak 5, trough -1
    assert max_drawdown([5, -3, 2, -5]) == pytest.approx(-6.0)
    assert max_drawdown([1, 2, 3]) == 0.0
    assert max_drawdown([]) == 0.0


def test_max_drawdown_from_start():
    assert max_drawdown([-2, -1]) == pytest.approx(-3.0)


def test_compute_trade_stats():
    trades = [_trade(p, i) for i, p in enumerate([10.0, -5.0, 15.0, -3.0])]
    s = compute_trade_stats(trades)
    assert s.total_trades == 4
    assert s.winning_trades == 2
    assert s.losing_trades == 2
    assert s.expectancy == pytest.approx(4.25)
    assert s.win_rate == 0.5
    assert s.realized_pl == pytest.approx(17.0)
    assert s.avg_win == pytest.approx(12.5)
    assert s.avg_loss == pytest.approx(-4.0)
    assert s.max_drawdown == pytest.approx(-5.0)


def test_compute_trade_stats_empty():
    s = compute_trade_stats([])
    assert s.total_trades == 0
    assert s.profit_factor == 0.0
    assert s.realized_pl == 0.0
