"""Analytics: statistics over closed trades."""

from chart_trainer.analytics.metrics import (
    TradeStats,
    compute_trade_stats,
    win_rate,
    profit_factor,
    expectancy,
    max_drawdown,
)

__all__ = [
    "TradeStats",
    "compute_trade_stats",
    "win_rate",
    "profit_factor",
    "expectancy",
    "max_drawdown",
]
