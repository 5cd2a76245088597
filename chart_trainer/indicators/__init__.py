"""Indicators: moving average, weekly bars, RSI, MACD."""

from chart_trainer.indicators.series import (
    calculate_ma,
    generate_weekly_data,
    calculate_rsi,
    calculate_macd,
)

__all__ = ["calculate_ma", "generate_weekly_data", "calculate_rsi", "calculate_macd"]
