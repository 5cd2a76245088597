"""Candlestick replay and paper-trading practice engine."""

__version__ = "0.1.0"
