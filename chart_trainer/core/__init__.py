"""Core: config, types, errors, logging."""

from chart_trainer.core.config import load_config, Config
from chart_trainer.core.types import Bar, Direction, Lot, Position, Positions, Trade, LinePoint, MacdPoint
from chart_trainer.core.errors import (
    TrainerError,
    MalformedInput,
    EmptySeries,
    InvalidCommand,
    DateOutOfRange,
    DataFetchError,
)
from chart_trainer.core.logger import setup_logging

__all__ = [
    "load_config",
    "Config",
    "Bar",
    "Direction",
    "Lot",
    "Position",
    "Positions",
    "Trade",
    "LinePoint",
    "MacdPoint",
    "TrainerError",
    "MalformedInput",
    "EmptySeries",
    "InvalidCommand",
    "DateOutOfRange",
    "DataFetchError",
    "setup_logging",
]
