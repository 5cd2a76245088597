"""
Core data types for bars, lots, positions, trades, and derived series points.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


@dataclass(frozen=True)
class Bar:
    """Daily OHLCV candle."""
    time: date
    open: float
    high: float
    low: float
    close: float
    volume: int = 0


@dataclass(frozen=True)
class Lot:
    """One open entry inside a position."""
    id: str
    price: float
    size: float
    date: date


@dataclass(frozen=True)
class Position:
    """Same-direction open lots, oldest first. Never empty."""
    direction: Direction
    entries: Tuple[Lot, ...]

    @property
    def total_size(self) -> float:
        return sum(e.size for e in self.entries)

    @property
    def avg_price(self) -> float:
        total = self.total_size
        if total <= 0:
            return 0.0
        return sum(e.price * e.size for e in self.entries) / total


@dataclass(frozen=True)
class Positions:
    """Two fixed slots, one per direction."""
    long: Optional[Position] = None
    short: Optional[Position] = None

    def get(self, direction: Direction) -> Optional[Position]:
        return self.long if direction == Direction.LONG else self.short

    def with_slot(self, direction: Direction, position: Optional[Position]) -> "Positions":
        if direction == Direction.LONG:
            return Positions(long=position, short=self.short)
        return Positions(long=self.long, short=position)

    def open(self) -> Tuple[Position, ...]:
        return tuple(p for p in (self.long, self.short) if p is not None)


@dataclass(frozen=True)
class Trade:
    """Closed lot record. Never mutated after it is appended to history."""
    id: str
    direction: Direction
    entry_price: float
    exit_price: float
    size: float
    entry_date: date
    exit_date: date
    profit: float


@dataclass(frozen=True)
class LinePoint:
    """One point of a derived line series; value None = undefined."""
    time: date
    value: Optional[float]


@dataclass(frozen=True)
class MacdPoint:
    time: date
    macd: Optional[float]
    signal: Optional[float]
    histogram: Optional[float]
