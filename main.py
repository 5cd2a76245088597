#!/usr/bin/env python3
"""
Chart Trainer CLI: inspect | replay
Usage:
  python main.py inspect data.json [--config config.yaml]
  python main.py replay data.csv --start 2024-01-04 --actions "long,next,next,close-long"
  python main.py replay --ticker 7203 --start 2024-01-04 --actions "short,next,close-all-short"
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chart_trainer.core.config import load_config, Config
from chart_trainer.core.errors import InvalidCommand, TrainerError
from chart_trainer.core.logger import setup_logging
from chart_trainer.core.types import Direction
from chart_trainer.indicators.series import calculate_ma, calculate_macd, calculate_rsi
from chart_trainer.replay import engine
from chart_trainer.replay.session import ReplaySession
from chart_trainer.utils.yahoo import fetch_chart_json

logger = logging.getLogger("chart_trainer")

ACTIONS = {
    "next": lambda s: s.next_day(),
    "long": lambda s: s.open(Direction.LONG),
    "short": lambda s: s.open(Direction.SHORT),
    "close-long": lambda s: s.close_partial(Direction.LONG),
    "close-short": lambda s: s.close_partial(Direction.SHORT),
    "close-all-long": lambda s: s.close_all(Direction.LONG),
    "close-all-short": lambda s: s.close_all(Direction.SHORT),
}


def parse_actions(text: str) -> list[str]:
    """Comma-separated action tokens. 'next*5' repeats a token."""
    tokens: list[str] = []
    for raw in text.split(","):
        raw = raw.strip().lower()
        if not raw:
            continue
        name, _, count = raw.partition("*")
        if name not in ACTIONS:
            raise InvalidCommand(f"Unknown action: {name}")
        tokens.extend([name] * (int(count) if count.isdigit() else 1))
    return tokens


def load_session(config: Config, path: Path | None, ticker: str | None) -> ReplaySession:
    session = ReplaySession(
        lot_size=config.lot_size,
        prefs=config.preferences(),
        visible_window=config.visible_window,
    )
    if ticker:
        text = fetch_chart_json(
            ticker,
            suffix=config.ticker_suffix,
            start=config.data_start_date,
            timeout=config.fetch_timeout_s,
        )
        session.load_text(text, ticker)
    else:
        session.load_text(path.read_text(encoding="utf-8"), path.name)
    return session


def run_inspect(config: Config, path: Path | None, ticker: str | None) -> int:
    """Print series summary and the latest indicator values."""
    session = load_session(config, path, ticker)
    state = session.state
    bars = list(state.bars)
    print(f"\n--- {state.title} ---")
    print(f"Bars: {len(bars)} ({bars[0].time} .. {bars[-1].time})")
    print(f"Weekly bars: {len(state.weekly_bars)}")
    print(f"Last close: {bars[-1].close:.2f}")
    for period in config.ma_periods:
        ma = calculate_ma(bars, period)
        value = ma[-1].value if ma else None
        print(f"MA{period}: {value if value is not None else '-'}")
    rsi = calculate_rsi(bars, config.rsi_period)
    print(f"RSI{config.rsi_period}: {_fmt(rsi[-1].value if rsi else None)}")
    macd = calculate_macd(bars, config.macd_fast, config.macd_slow, config.macd_signal)
    if macd:
        last = macd[-1]
        print(f"MACD: {_fmt(last.macd)} signal: {_fmt(last.signal)} hist: {_fmt(last.histogram)}")
    return 0


def run_replay(config: Config, path: Path | None, ticker: str | None, start: str, actions: str) -> int:
    """Run a scripted replay and print P&L and trade stats."""
    tokens = parse_actions(actions)
    session = load_session(config, path, ticker)
    session.start(start)
    for token in tokens:
        ACTIONS[token](session)
    state = session.state
    bar = engine.current_bar(state)
    stats = session.summary()
    print("\n--- Replay Results ---")
    print(f"Cursor: {state.cursor} ({bar.time}) close={bar.close:.2f}")
    for pos in state.positions.open():
        print(f"Open {pos.direction.value}: {len(pos.entries)} lots, size={pos.total_size} avg={pos.avg_price:.2f}")
    for t in engine.trades_newest_first(state):
        print(f"  {t.exit_date} {t.direction.value:<5} {t.entry_price:.2f} -> {t.exit_price:.2f} profit={t.profit:.2f}")
    print(f"Realized P&L: {state.realized_pl:.2f}")
    print(f"Unrealized P&L: {state.unrealized_pl:.2f}")
    print(f"Trades: {stats.total_trades} (wins: {stats.winning_trades}, losses: {stats.losing_trades})")
    print(f"Win rate: {stats.win_rate*100:.1f}%")
    print(f"Profit factor: {stats.profit_factor:.2f}")
    print(f"Max drawdown: {stats.max_drawdown:.2f}")
    return 0


def _fmt(value: float | None) -> str:
    return f"{value:.2f}" if value is not None else "-"


def main() -> int:
    parser = argparse.ArgumentParser(description="Chart Trainer CLI")
    parser.add_argument("mode", choices=["inspect", "replay"], help="Inspect data or run a scripted replay")
    parser.add_argument("file", nargs="?", type=Path, default=None, help="Chart JSON or CSV file")
    parser.add_argument("--ticker", default=None, help="Download data for this ticker instead of a file")
    parser.add_argument("--start", default=None, help="Replay start date (YYYY-MM-DD)")
    parser.add_argument("--actions", default="", help="Comma-separated actions, e.g. long,next*3,close-long")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    args = parser.parse_args()
    if args.file is None and not args.ticker:
        parser.error("give a data file or --ticker")
    if args.mode == "replay" and not args.start:
        parser.error("replay needs --start")

    config = load_config(args.config, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    try:
        if args.mode == "inspect":
            return run_inspect(config, args.file, args.ticker)
        return run_replay(config, args.file, args.ticker, args.start, args.actions)
    except TrainerError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    except OSError as e:
        logger.error("Could not read %s: %s", args.file, e)
        return 1


if __name__ == "__main__":
    exit(main())
