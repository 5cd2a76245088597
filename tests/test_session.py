"""Unit tests for replay.session."""

import pytest
from chart_trainer.core.errors import InvalidCommand, MalformedInput
from chart_trainer.core.types import Direction
from chart_trainer.replay.preferences import toggle_macd, toggle_rsi
from chart_trainer.replay.session import ReplaySession

CSV = "\n".join(
    ["date,open,high,low,close,volume"]
    + [f"2024-01-{d:02d},{c},{c + 1},{c - 1},{c},1000" for d, c in zip(range(1, 31), range(100, 130))]
)


def test_load_text_and_trade():
    session = ReplaySession()
    session.load_text(CSV, "prices.csv")
    assert session.state.title == "prices.csv"
    assert len(session.state.bars) == 30
    session.start("2024-01-10")
    session.open(Direction.LONG)
    session.next_day()
    session.next_day()
    session.close_partial(Direction.LONG)
    assert session.state.realized_pl == pytest.approx(2.0)
    stats = session.summary()
    assert stats.total_trades == 1
    assert stats.win_rate == 1.0


def test_load_error_keeps_previous_state():
    session = ReplaySession()
    session.load_text(CSV, "prices.csv")
    before = session.state
    with pytest.raises(MalformedInput):
        session.load_text("date,open\n2024-01-01,1\n", "bad.csv")
    assert session.state is before


def test_invalid_command_propagates():
    session = ReplaySession()
    session.load_text(CSV, "prices.csv")
    with pytest.raises(InvalidCommand):
        session.open(Direction.SHORT)


def test_derived_series_follow_visibility():
    session = ReplaySession()
    session.load_text(CSV, "prices.csv")
    session.start("2024-01-08")
    derived = session.derived()
    assert set(derived.ma) == {"5", "10", "20", "50", "100"}
    assert len(derived.ma["5"]) == 8
    assert derived.ma["20"] == []  # fewer visible bars than the period
    assert derived.rsi == [] and derived.macd == []

    session.update_prefs(toggle_rsi)
    session.update_prefs(toggle_macd)
    derived = session.derived()
    assert len(derived.rsi) == 8
    assert len(derived.macd) == 8


def test_visible_range_window():
    session = ReplaySession(visible_window=5)
    session.load_text(CSV, "prices.csv")
    assert session.visible_range() == (25, 29)
    session.start("2024-01-03")
    assert session.visible_range() == (0, 2)


def test_close_all_logs_each_trade(caplog):
    session = ReplaySession()
    session.load_text(CSV, "prices.csv")
    session.start("2024-01-01")
    session.open(Direction.SHORT)
    session.open(Direction.SHORT)
    session.next_day()
    with caplog.at_level("INFO", logger="chart_trainer.replay"):
        session.close_all(Direction.SHORT)
    assert sum("Close short" in r.getMessage() for r in caplog.records) == 2
    assert session.state.realized_pl == pytest.approx(-2.0)
