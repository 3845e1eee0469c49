# coinmarketcap/scripts/fetch.py
from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Callable, Optional, Sequence

from pydantic import BaseModel

from coinmarketcap.config.settings import get_settings
from coinmarketcap.services.client import MarketDataClient
from coinmarketcap.services.errors import CoinMarketCapError


def _jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump()
    if isinstance(result, list):
        return [_jsonable(item) for item in result]
    if isinstance(result, dict):
        return {key: _jsonable(value) for key, value in result.items()}
    return result


def execute(args: argparse.Namespace, client: MarketDataClient) -> Any:
    if args.command == "listings":
        return client.fetch_listings()
    if args.command == "tickers":
        return client.fetch_tickers(start=args.start, limit=args.limit, convert=args.convert)
    if args.command == "ticker":
        return client.fetch_ticker(args.id)
    return client.fetch_global_data(convert=args.convert)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch CoinMarketCap market data as JSON")
    parser.add_argument("command", choices=["listings", "tickers", "ticker", "global"])
    parser.add_argument("--start", type=int, default=0)
    parser.add_argument("--limit", type=int, default=0)
    parser.add_argument("--convert", default="")
    parser.add_argument("--id", type=int, default=0)
    parser.add_argument("--base-url", default=None)
    parser.add_argument("--timeout", type=float, default=None)
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    client_factory: Callable[..., MarketDataClient] = MarketDataClient,
) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=get_settings().CMC_LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        client = client_factory(base_url=args.base_url, timeout=args.timeout)
        result = execute(args, client)
    except CoinMarketCapError as exc:
        print(json.dumps({"error": str(exc), "type": type(exc).__name__}))
        raise SystemExit(1)

    print(json.dumps(_jsonable(result)))
    raise SystemExit(0)


if __name__ == "__main__":
    main()
