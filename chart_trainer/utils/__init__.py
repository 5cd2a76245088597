"""Utils: remote market data download."""

from chart_trainer.utils.yahoo import fetch_chart_json, to_symbol

__all__ = ["fetch_chart_json", "to_symbol"]
