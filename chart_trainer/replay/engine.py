"""
Replay & position engine: a pure reducer over an immutable EngineState.

Each command returns a new state or raises InvalidCommand before anything is
built, so a rejected command never leaves a half-applied state behind.
Unrealized P&L is always recomputed per lot from the current positions
against the close at the cursor.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

from chart_trainer.core.errors import DateOutOfRange, EmptySeries, InvalidCommand, MalformedInput
from chart_trainer.core.types import Bar, Direction, Lot, Position, Positions, Trade
from chart_trainer.indicators.series import generate_weekly_data
from chart_trainer.replay.preferences import DisplayPreferences, default_preferences

DateLike = Union[date, datetime, str]


@dataclass(frozen=True)
class EngineState:
    """Aggregate root. Trades are kept oldest first."""
    bars: Tuple[Bar, ...] = ()
    weekly_bars: Tuple[Bar, ...] = ()
    title: str = "Chart Trainer"
    cursor: Optional[int] = None
    replaying: bool = False
    positions: Positions = Positions()
    trades: Tuple[Trade, ...] = ()
    realized_pl: float = 0.0
    unrealized_pl: float = 0.0
    lot_size: float = 1.0
    next_lot_id: int = 1
    prefs: DisplayPreferences = field(default_factory=default_preferences)

    @property
    def loaded(self) -> bool:
        return len(self.bars) > 0


# --- P&L -------------------------------------------------------------------

def lot_profit(direction: Direction, entry_price: float, mark: float, size: float) -> float:
    if direction == Direction.LONG:
        return (mark - entry_price) * size
    return (entry_price - mark) * size


def compute_unrealized(positions: Positions, mark: float) -> float:
    """Mark every open lot to `mark` and sum."""
    return sum(
        lot_profit(pos.direction, lot.price, mark, lot.size)
        for pos in positions.open()
        for lot in pos.entries
    )


# --- commands --------------------------------------------------------------

def initial_state(lot_size: float = 1.0, prefs: Optional[DisplayPreferences] = None) -> EngineState:
    """Idle state: no data loaded."""
    if lot_size <= 0:
        raise ValueError("lot_size must be positive")
    return EngineState(lot_size=lot_size, prefs=prefs or default_preferences())


def load_data(state: EngineState, bars: List[Bar], title: str) -> EngineState:
    """Replace the series and reset all session state. Display preferences are kept."""
    if not bars:
        raise EmptySeries("Cannot load an empty series.")
    if any(b.time >= a.time for b, a in zip(bars, bars[1:])):
        raise MalformedInput("Bar times must be unique and strictly increasing.")
    series = tuple(bars)
    return replace(
        state,
        bars=series,
        weekly_bars=tuple(generate_weekly_data(list(series))),
        title=title,
        cursor=None,
        replaying=False,
        positions=Positions(),
        trades=(),
        realized_pl=0.0,
        unrealized_pl=0.0,
        next_lot_id=1,
    )


def start_replay(state: EngineState, when: DateLike) -> EngineState:
    """Move the cursor to the first bar on or after `when`; a new run starts clean."""
    if not state.loaded:
        raise InvalidCommand("No data loaded.")
    target = _to_date(when)
    index = next((i for i, b in enumerate(state.bars) if b.time >= target), None)
    if index is None:
        raise DateOutOfRange(f"No bar on or after {target.isoformat()} (last bar {state.bars[-1].time.isoformat()}).")
    return replace(
        state,
        cursor=index,
        replaying=True,
        positions=Positions(),
        trades=(),
        realized_pl=0.0,
        unrealized_pl=0.0,
    )


def advance_day(state: EngineState) -> EngineState:
    """Step one bar. At the last bar the replay ends; repeating that is a no-op."""
    cursor = _require_cursor(state)
    if cursor >= len(state.bars) - 1:
        if not state.replaying:
            return state
        return replace(state, replaying=False)
    new_cursor = cursor + 1
    mark = state.bars[new_cursor].close
    return replace(
        state,
        cursor=new_cursor,
        unrealized_pl=compute_unrealized(state.positions, mark),
    )


def open_position(state: EngineState, direction: Direction) -> EngineState:
    """Add one lot at the cursor close to the position for `direction`."""
    cursor = _require_cursor(state)
    direction = _direction(direction)
    bar = state.bars[cursor]
    lot = Lot(id=f"L{state.next_lot_id}", price=bar.close, size=state.lot_size, date=bar.time)
    existing = state.positions.get(direction)
    entries = (existing.entries if existing else ()) + (lot,)
    positions = state.positions.with_slot(direction, Position(direction=direction, entries=entries))
    return replace(
        state,
        positions=positions,
        next_lot_id=state.next_lot_id + 1,
        unrealized_pl=compute_unrealized(positions, bar.close),
    )


def close_partial(state: EngineState, direction: Direction) -> EngineState:
    """Close the oldest lot (FIFO) at the cursor close."""
    cursor = _require_cursor(state)
    direction = _direction(direction)
    pos = _require_position(state, direction)
    bar = state.bars[cursor]
    oldest, remaining = pos.entries[0], pos.entries[1:]
    trade = _close_lot(direction, oldest, bar)
    new_pos = Position(direction=direction, entries=remaining) if remaining else None
    positions = state.positions.with_slot(direction, new_pos)
    return replace(
        state,
        positions=positions,
        trades=state.trades + (trade,),
        realized_pl=state.realized_pl + trade.profit,
        unrealized_pl=compute_unrealized(positions, bar.close),
    )


def close_all(state: EngineState, direction: Direction) -> EngineState:
    """Close every lot of the position in one step; one trade per lot."""
    cursor = _require_cursor(state)
    direction = _direction(direction)
    pos = _require_position(state, direction)
    bar = state.bars[cursor]
    new_trades = tuple(_close_lot(direction, lot, bar) for lot in pos.entries)
    positions = state.positions.with_slot(direction, None)
    return replace(
        state,
        positions=positions,
        trades=state.trades + new_trades,
        realized_pl=state.realized_pl + sum(t.profit for t in new_trades),
        unrealized_pl=compute_unrealized(positions, bar.close),
    )


def apply_prefs(state: EngineState, fn, *args) -> EngineState:
    """Apply a preferences function (see replay.preferences) to the state's prefs."""
    return replace(state, prefs=fn(state.prefs, *args))


# --- command objects -------------------------------------------------------

@dataclass(frozen=True)
class LoadData:
    bars: Tuple[Bar, ...]
    title: str


@dataclass(frozen=True)
class StartReplay:
    when: DateLike


@dataclass(frozen=True)
class AdvanceDay:
    pass


@dataclass(frozen=True)
class OpenPosition:
    direction: Direction


@dataclass(frozen=True)
class ClosePartial:
    direction: Direction


@dataclass(frozen=True)
class CloseAll:
    direction: Direction


Command = Union[LoadData, StartReplay, AdvanceDay, OpenPosition, ClosePartial, CloseAll]


def reduce(state: EngineState, command: Command) -> EngineState:
    """Dispatch a command object to its transition."""
    if isinstance(command, LoadData):
        return load_data(state, list(command.bars), command.title)
    if isinstance(command, StartReplay):
        return start_replay(state, command.when)
    if isinstance(command, AdvanceDay):
        return advance_day(state)
    if isinstance(command, OpenPosition):
        return open_position(state, command.direction)
    if isinstance(command, ClosePartial):
        return close_partial(state, command.direction)
    if isinstance(command, CloseAll):
        return close_all(state, command.direction)
    raise InvalidCommand(f"Unknown command: {command!r}")


# --- read views ------------------------------------------------------------

def current_bar(state: EngineState) -> Optional[Bar]:
    if state.cursor is None:
        return None
    return state.bars[state.cursor]


def mark_price(state: EngineState) -> Optional[float]:
    bar = current_bar(state)
    return bar.close if bar else None


def visible_bars(state: EngineState) -> Tuple[Bar, ...]:
    """Bars up to and including the cursor while replaying, else the whole series."""
    if state.replaying and state.cursor is not None:
        return state.bars[: state.cursor + 1]
    return state.bars


def visible_range(state: EngineState, window: int = 100) -> Optional[Tuple[int, int]]:
    """Logical (from, to) index range showing the last `window` visible bars."""
    n = len(visible_bars(state))
    if n == 0:
        return None
    return max(0, n - window), n - 1


def trades_newest_first(state: EngineState) -> Tuple[Trade, ...]:
    return tuple(reversed(state.trades))


@dataclass(frozen=True)
class Marker:
    time: date
    kind: str  # "entry" | "exit" | "open_long" | "open_short"
    above_bar: bool
    text: str
    profit: Optional[float] = None


def chart_markers(state: EngineState) -> List[Marker]:
    """Entry/exit markers for closed trades plus one marker per open lot, sorted by time."""
    markers: List[Marker] = []
    for t in state.trades:
        markers.append(Marker(time=t.entry_date, kind="entry", above_bar=False, text="E"))
        markers.append(Marker(time=t.exit_date, kind="exit", above_bar=True, text="X", profit=t.profit))
    for pos in state.positions.open():
        for lot in pos.entries:
            markers.append(Marker(
                time=lot.date,
                kind=f"open_{pos.direction.value}",
                above_bar=pos.direction == Direction.SHORT,
                text=pos.direction.value[0].upper(),
            ))
    return sorted(markers, key=lambda m: m.time)


# --- helpers ---------------------------------------------------------------

def _to_date(when: DateLike) -> date:
    if isinstance(when, datetime):
        return when.date()
    if isinstance(when, date):
        return when
    try:
        return datetime.strptime(str(when).strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidCommand(f"Invalid replay date: {when!r}") from e


def _direction(value) -> Direction:
    try:
        return Direction(value)
    except ValueError as e:
        raise InvalidCommand(f"Unknown direction: {value!r}") from e


def _require_cursor(state: EngineState) -> int:
    if state.cursor is None:
        raise InvalidCommand("Replay has not started.")
    return state.cursor


def _require_position(state: EngineState, direction: Direction) -> Position:
    pos = state.positions.get(direction)
    if pos is None or not pos.entries:
        raise InvalidCommand(f"No open {direction.value} position.")
    return pos


def _close_lot(direction: Direction, lot: Lot, bar: Bar) -> Trade:
    return Trade(
        id=lot.id,
        direction=direction,
        entry_price=lot.price,
        exit_price=bar.close,
        size=lot.size,
        entry_date=lot.date,
        exit_date=bar.time,
        profit=lot_profit(direction, lot.price, bar.close, lot.size),
    )
