"""
Replay session: stateful controller around the pure engine for the shell.
Holds the current EngineState, applies commands, logs transitions.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from chart_trainer.analytics.metrics import TradeStats, compute_trade_stats
from chart_trainer.core.types import Bar, Direction, LinePoint, MacdPoint
from chart_trainer.data.ingest import chart_title, parse_stock_data
from chart_trainer.indicators.series import calculate_ma, calculate_macd, calculate_rsi
from chart_trainer.replay import engine
from chart_trainer.replay.engine import DateLike, EngineState
from chart_trainer.replay.preferences import DisplayPreferences

logger = logging.getLogger("chart_trainer.replay")


@dataclass
class DerivedSeries:
    """Indicator lines for the visible bars. Hidden indicators are left empty."""
    ma: Dict[str, List[LinePoint]] = field(default_factory=dict)
    rsi: List[LinePoint] = field(default_factory=list)
    macd: List[MacdPoint] = field(default_factory=list)


class ReplaySession:
    """
    Owns one EngineState. All mutation goes through the command methods;
    readers get the immutable snapshot via `state`.
    """

    def __init__(
        self,
        lot_size: float = 1.0,
        prefs: Optional[DisplayPreferences] = None,
        visible_window: int = 100,
    ):
        self.visible_window = visible_window
        self._state = engine.initial_state(lot_size=lot_size, prefs=prefs)

    @property
    def state(self) -> EngineState:
        return self._state

    def load(self, bars: List[Bar], title: str) -> EngineState:
        self._state = engine.load_data(self._state, bars, title)
        logger.info(
            "Loaded %s: %d bars (%s .. %s), %d weeks",
            title, len(bars), bars[0].time, bars[-1].time, len(self._state.weekly_bars),
        )
        return self._state

    def load_text(self, text: str, fallback_title: str) -> EngineState:
        """Parse a chart JSON / delimited payload and load it. Prior state is kept on error."""
        data = parse_stock_data(text)
        return self.load(data.bars, chart_title(data.meta, fallback_title))

    def start(self, when: DateLike) -> EngineState:
        self._state = engine.start_replay(self._state, when)
        bar = engine.current_bar(self._state)
        logger.info("Replay started at index %d (%s)", self._state.cursor, bar.time)
        return self._state

    def next_day(self) -> EngineState:
        was_replaying = self._state.replaying
        self._state = engine.advance_day(self._state)
        if was_replaying and not self._state.replaying:
            logger.info("Replay reached the last bar")
        else:
            logger.debug(
                "Day %d close=%.2f unrealized=%.2f",
                self._state.cursor, engine.mark_price(self._state), self._state.unrealized_pl,
            )
        return self._state

    def open(self, direction: Direction) -> EngineState:
        self._state = engine.open_position(self._state, direction)
        pos = self._state.positions.get(Direction(direction))
        logger.info(
            "Open %s @ %.2f | size=%s avg=%.2f",
            pos.direction.value, pos.entries[-1].price, pos.total_size, pos.avg_price,
        )
        return self._state

    def close_partial(self, direction: Direction) -> EngineState:
        self._state = engine.close_partial(self._state, direction)
        self._log_close(1)
        return self._state

    def close_all(self, direction: Direction) -> EngineState:
        before = len(self._state.trades)
        self._state = engine.close_all(self._state, direction)
        self._log_close(len(self._state.trades) - before)
        return self._state

    def update_prefs(self, fn, *args) -> EngineState:
        """Apply a function from replay.preferences, e.g. update_prefs(toggle_ma, "20")."""
        self._state = engine.apply_prefs(self._state, fn, *args)
        return self._state

    def derived(self) -> DerivedSeries:
        """MA over the visible bars; RSI/MACD over the full series, cut to the visible length."""
        state = self._state
        prefs = state.prefs
        visible = list(engine.visible_bars(state))
        out = DerivedSeries()
        for ma_id, cfg in prefs.ma_configs.items():
            if cfg.visible:
                out.ma[ma_id] = calculate_ma(visible, cfg.period)
        if prefs.rsi.visible:
            out.rsi = calculate_rsi(list(state.bars), prefs.rsi.period)[: len(visible)]
        if prefs.macd.visible:
            out.macd = calculate_macd(
                list(state.bars),
                prefs.macd.fast_period,
                prefs.macd.slow_period,
                prefs.macd.signal_period,
            )[: len(visible)]
        return out

    def visible_range(self):
        return engine.visible_range(self._state, self.visible_window)

    def summary(self) -> TradeStats:
        return compute_trade_stats(self._state.trades)

    def _log_close(self, n: int) -> None:
        for t in self._state.trades[len(self._state.trades) - n:]:
            logger.info(
                "Close %s %s: %.2f -> %.2f profit=%.2f",
                t.direction.value, t.id, t.entry_price, t.exit_price, t.profit,
            )
        logger.info(
            "Realized=%.2f unrealized=%.2f",
            self._state.realized_pl, self._state.unrealized_pl,
        )
