from __future__ import annotations

import json

import httpx
import pytest

from coinmarketcap.scripts import fetch
from coinmarketcap.services.client import MarketDataClient


BASE_URL = "https://api.test/v2"


def _factory(status: int = 200, payload=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)

    def make(base_url=None, timeout=None):
        return MarketDataClient(BASE_URL, timeout, transport=httpx.MockTransport(handler))

    return make


def test_ticker_command_prints_json(capsys):
    payload = {
        "data": {"id": 1, "name": "Bitcoin", "symbol": "BTC", "quotes": {"USD": {"price": 9000.5}}},
        "metadata": {"timestamp": 1, "error": None},
    }
    with pytest.raises(SystemExit) as info:
        fetch.main(["ticker", "--id", "1"], client_factory=_factory(payload=payload))
    assert info.value.code == 0

    out = json.loads(capsys.readouterr().out)
    assert out["symbol"] == "BTC"
    assert out["quotes"]["USD"]["price"] == 9000.5
    assert out["max_supply"] == 0.0


def test_tickers_command_forwards_paging(capsys):
    seen: list[httpx.Request] = []
    payload = {"data": {}, "metadata": {"timestamp": 1, "error": None}}
    with pytest.raises(SystemExit) as info:
        fetch.main(
            ["tickers", "--start", "2", "--limit", "10", "--convert", "EUR"],
            client_factory=_factory(payload=payload, seen=seen),
        )
    assert info.value.code == 0
    assert str(seen[0].url) == "https://api.test/v2/ticker/?start=2&limit=10&convert=EUR"
    assert json.loads(capsys.readouterr().out) == {}


def test_error_prints_type_and_exits_nonzero(capsys):
    with pytest.raises(SystemExit) as info:
        fetch.main(["global"], client_factory=_factory(status=503, payload={}))
    assert info.value.code == 1

    out = json.loads(capsys.readouterr().out)
    assert out["type"] == "HttpStatusError"
    assert "503" in out["error"]


def test_ticker_without_id_is_rejected(capsys):
    with pytest.raises(SystemExit) as info:
        fetch.main(["ticker"], client_factory=_factory(payload={}))
    assert info.value.code == 1
    assert json.loads(capsys.readouterr().out)["type"] == "InvalidArgumentError"


def test_global_command_forwards_convert(capsys):
    seen: list[httpx.Request] = []
    payload = {"data": {"active_markets": 7}, "metadata": {"timestamp": 1, "error": None}}
    with pytest.raises(SystemExit) as info:
        fetch.main(["global", "--convert", "EUR"], client_factory=_factory(payload=payload, seen=seen))
    assert info.value.code == 0
    assert str(seen[0].url) == "https://api.test/v2/global/?convert=EUR"
    assert json.loads(capsys.readouterr().out)["active_markets"] == 7


def test_unknown_command_rejected_by_parser():
    with pytest.raises(SystemExit) as info:
        fetch.main(["markets"], client_factory=_factory(payload={}))
    assert info.value.code == 2
