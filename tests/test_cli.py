"""Tests for the CLI entry points in main.py."""

import logging
import sys

import pytest
import main
from chart_trainer.core.errors import InvalidCommand

CSV = "\n".join(
    ["date,open,high,low,close,volume"]
    + [f"2024-02-{d:02d},{c},{c + 1},{c - 1},{c},500" for d, c in zip(range(1, 11), range(50, 60))]
)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger("chart_trainer")
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()


def test_parse_actions():
    assert main.parse_actions("long, next*3 ,close-long,") == ["long", "next", "next", "next", "close-long"]
    with pytest.raises(InvalidCommand):
        main.parse_actions("buy")


def test_replay_command(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    data = tmp_path / "prices.csv"
    data.write_text(CSV, encoding="utf-8")
    monkeypatch.setattr(sys, "argv", [
        "main.py", "replay", str(data), "--start", "2024-02-01",
        "--actions", "long,long,next*2,close-long", "--config", str(tmp_path / "none.yaml"),
    ])
    assert main.main() == 0
    out = capsys.readouterr().out
    assert "Realized P&L: 2.00" in out
    assert "Unrealized P&L: 2.00" in out


def test_inspect_command(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    data = tmp_path / "prices.csv"
    data.write_text(CSV, encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["main.py", "inspect", str(data), "--config", str(tmp_path / "none.yaml")])
    assert main.main() == 0
    out = capsys.readouterr().out
    assert "Bars: 10" in out
    assert "MA5: 57.0" in out


def test_replay_out_of_range_exits_nonzero(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    data = tmp_path / "prices.csv"
    data.write_text(CSV, encoding="utf-8")
    monkeypatch.setattr(sys, "argv", [
        "main.py", "replay", str(data), "--start", "2025-01-01", "--config", str(tmp_path / "none.yaml"),
    ])
    assert main.main() == 1
