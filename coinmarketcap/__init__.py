"""Typed client for the public CoinMarketCap v2 market data API."""

from coinmarketcap.schemas.market import (
    GlobalData,
    GlobalQuote,
    Listing,
    MetaData,
    Quote,
    Ticker,
)
from coinmarketcap.services.client import (
    AsyncMarketDataClient,
    MarketDataClient,
    fetch_global_data,
    fetch_listings,
    fetch_ticker,
    fetch_tickers,
)
from coinmarketcap.services.errors import (
    ApiError,
    CoinMarketCapError,
    DecodeError,
    HttpStatusError,
    InvalidArgumentError,
    TransportError,
    TransportTimeoutError,
)

__all__ = [
    "ApiError",
    "AsyncMarketDataClient",
    "CoinMarketCapError",
    "DecodeError",
    "GlobalData",
    "GlobalQuote",
    "HttpStatusError",
    "InvalidArgumentError",
    "Listing",
    "MarketDataClient",
    "MetaData",
    "Quote",
    "Ticker",
    "TransportError",
    "TransportTimeoutError",
    "fetch_global_data",
    "fetch_listings",
    "fetch_ticker",
    "fetch_tickers",
]
