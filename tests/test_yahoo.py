"""Unit tests for utils.yahoo (network calls are monkeypatched)."""

import pytest
import requests
from chart_trainer.core.errors import DataFetchError
from chart_trainer.utils import yahoo
from chart_trainer.utils.yahoo import fetch_chart_json, to_symbol


class _Response:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


def test_to_symbol():
    assert to_symbol("7203") == "7203.T"
    assert to_symbol(" aapl ", suffix="") == "AAPL"
    assert to_symbol("7203.T") == "7203.T"
    with pytest.raises(DataFetchError):
        to_symbol("  ")


def test_fetch_ok(monkeypatch):
    calls = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.update(url=url, params=params, timeout=timeout)
        return _Response(200, '{"chart": {}}')

    monkeypatch.setattr(yahoo.requests, "get", fake_get)
    text = fetch_chart_json("7203", start="2020-01-01", timeout=3)
    assert text == '{"chart": {}}'
    assert calls["url"].endswith("/7203.T")
    assert calls["params"]["interval"] == "1d"
    assert calls["params"]["period1"] == 1577836800
    assert calls["timeout"] == 3


def test_fetch_not_found(monkeypatch):
    monkeypatch.setattr(yahoo.requests, "get", lambda *a, **k: _Response(404))
    with pytest.raises(DataFetchError, match="not found"):
        fetch_chart_json("9999")


def test_fetch_server_error(monkeypatch):
    monkeypatch.setattr(yahoo.requests, "get", lambda *a, **k: _Response(500, "oops"))
    with pytest.raises(DataFetchError, match="500"):
        fetch_chart_json("7203")


def test_fetch_network_error(monkeypatch):
    def boom(*a, **k):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(yahoo.requests, "get", boom)
    with pytest.raises(DataFetchError):
        fetch_chart_json("7203")
