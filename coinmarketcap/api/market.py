from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException

from coinmarketcap.schemas.market import GlobalData, Listing, Ticker
from coinmarketcap.services.client import AsyncMarketDataClient
from coinmarketcap.services.errors import (
    CoinMarketCapError,
    InvalidArgumentError,
    TransportTimeoutError,
)

logger = logging.getLogger("coinmarketcap.api")

router = APIRouter(prefix="/market", tags=["market"])


def get_client() -> AsyncMarketDataClient:
    return AsyncMarketDataClient()


def _to_http(exc: CoinMarketCapError) -> HTTPException:
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, TransportTimeoutError):
        return HTTPException(status_code=504, detail=str(exc))
    logger.warning("⚠️ upstream failure | type=%s | err=%s", type(exc).__name__, exc)
    return HTTPException(status_code=502, detail=str(exc))


@router.get("/listings", response_model=List[Listing])
async def get_listings():
    try:
        return await get_client().fetch_listings()
    except CoinMarketCapError as exc:
        raise _to_http(exc) from exc


@router.get("/ticker", response_model=Dict[str, Ticker])
async def get_tickers(start: int = 0, limit: int = 0, convert: str = ""):
    """
    Ranked ticker list.
    Example: /market/ticker?start=2&limit=10&convert=EUR
    """
    try:
        return await get_client().fetch_tickers(start=start, limit=limit, convert=convert)
    except CoinMarketCapError as exc:
        raise _to_http(exc) from exc


@router.get("/ticker/{ticker_id}", response_model=Ticker)
async def get_ticker(ticker_id: int):
    try:
        return await get_client().fetch_ticker(ticker_id)
    except CoinMarketCapError as exc:
        raise _to_http(exc) from exc


@router.get("/global", response_model=GlobalData)
async def get_global_data(convert: str = ""):
    try:
        return await get_client().fetch_global_data(convert=convert)
    except CoinMarketCapError as exc:
        raise _to_http(exc) from exc
