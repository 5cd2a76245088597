"""
Trade statistics over a replay session's closed trades:
win rate, profit factor, expectancy, drawdown of realized P&L.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from chart_trainer.core.types import Trade


@dataclass
class TradeStats:
    """Aggregate statistics of closed trades."""
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float
    profit_factor: float
    expectancy: float
    avg_win: float
    avg_loss: float
    realized_pl: float
    max_drawdown: float


def win_rate(pnls: List[float]) -> float:
    """Fraction of trades with positive PnL."""
    if not pnls:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls)


def profit_factor(pnls: List[float]) -> float:
    """Gross profit / gross loss. inf if no losses but some wins."""
    wins = sum(p for p in pnls if p > 0)
    losses = sum(-p for p in pnls if p < 0)
    if losses <= 0:
        return float("inf") if wins > 0 else 0.0
    return wins / losses


def expectancy(pnls: List[float]) -> float:
    """Average PnL per trade."""
    if not pnls:
        return 0.0
    return sum(pnls) / len(pnls)


def max_drawdown(pnls: List[float]) -> float:
    """Largest drop of cumulative realized P&L from its running peak (<= 0, price units)."""
    if not pnls:
        return 0.0
    curve = np.concatenate([[0.0], np.cumsum(np.array(pnls, dtype=float))])
    peak = np.maximum.accumulate(curve)
    return float(np.min(curve - peak))


def compute_trade_stats(trades: Sequence[Trade]) -> TradeStats:
    """Stats over trades in close order (oldest first)."""
    pnls = [t.profit for t in trades]
    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]
    return TradeStats(
        total_trades=len(pnls),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=win_rate(pnls),
        profit_factor=profit_factor(pnls),
        expectancy=expectancy(pnls),
        avg_win=sum(wins) / len(wins) if wins else 0.0,
        avg_loss=sum(losses) / len(losses) if losses else 0.0,
        realized_pl=sum(pnls),
        max_drawdown=max_drawdown(pnls),
    )
