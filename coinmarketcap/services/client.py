"""Clients for the public CoinMarketCap v2 API."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from coinmarketcap.config.settings import get_settings
from coinmarketcap.schemas.market import (
    GlobalData,
    GlobalDataResponse,
    Listing,
    ListingsResponse,
    Ticker,
    TickerResponse,
    TickersResponse,
    ResponseEnvelope,
)
from coinmarketcap.services.errors import (
    ApiError,
    DecodeError,
    HttpStatusError,
    InvalidArgumentError,
    TransportError,
    TransportTimeoutError,
)

logger = logging.getLogger("coinmarketcap.client")

API_LISTINGS = "/listings/"
API_TICKER = "/ticker/"
API_GLOBAL = "/global/"

REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

EnvelopeT = TypeVar("EnvelopeT", bound=ResponseEnvelope)


# ----------------------------
# request building
# ----------------------------
def _convert_param(convert: Optional[str]) -> Optional[str]:
    if convert is None:
        return None
    if not isinstance(convert, str):
        raise InvalidArgumentError(f"convert must be a currency code string, got {convert!r}")
    convert = convert.strip()
    return convert or None


def tickers_params(start: int = 0, limit: int = 0, convert: Optional[str] = "") -> Dict[str, Any]:
    """
    Query parameters for the ticker list, in start, limit, convert order.

    Zero / empty values mean "server default" and are left out.
    """
    for name, value in (("start", start), ("limit", limit)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
        if value < 0:
            raise InvalidArgumentError(f"{name} must not be negative, got {value}")

    params: Dict[str, Any] = {}
    if start:
        params["start"] = start
    if limit:
        params["limit"] = limit
    code = _convert_param(convert)
    if code:
        params["convert"] = code
    return params


def global_params(convert: Optional[str] = "") -> Dict[str, Any]:
    code = _convert_param(convert)
    return {"convert": code} if code else {}


def ticker_path(ticker_id: int) -> str:
    if isinstance(ticker_id, bool) or not isinstance(ticker_id, int):
        raise InvalidArgumentError(f"id must be an integer, got {ticker_id!r}")
    if ticker_id <= 0:
        raise InvalidArgumentError("id is required")
    return f"{API_TICKER}{ticker_id}/"


def build_url(base_url: str, path: str, params: Optional[Dict[str, Any]] = None) -> str:
    """Join base, path and query string (single '?', '&' between params)."""
    url = httpx.URL(base_url.rstrip("/") + path)
    if params:
        url = url.copy_merge_params(params)
    return str(url)


# ----------------------------
# response handling
# ----------------------------
def _check_status(endpoint: str, response: httpx.Response) -> None:
    if response.status_code != httpx.codes.OK:
        logger.warning("⚠️ cmc bad status | endpoint=%s | status=%s", endpoint, response.status_code)
        raise HttpStatusError(endpoint, response.status_code)


def _time_left(deadline: float) -> float:
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise httpx.ConnectTimeout("deadline passed before the request was sent")
    return remaining


def _check_deadline(deadline: float, request: httpx.Request) -> None:
    if time.monotonic() > deadline:
        raise httpx.ReadTimeout("round trip exceeded deadline", request=request)


def decode_envelope(endpoint: str, body: bytes, envelope_type: Type[EnvelopeT]) -> EnvelopeT:
    """
    Decode a response body into `envelope_type`.

    An error reported in the metadata wins over any schema problem in `data`.
    """
    try:
        payload = json.loads(body)
    except ValueError as exc:
        logger.warning("⚠️ cmc decode error | endpoint=%s | err=%s", endpoint, exc)
        raise DecodeError(endpoint, f"invalid JSON ({exc})") from exc

    if not isinstance(payload, dict):
        raise DecodeError(endpoint, f"expected a JSON object, got {type(payload).__name__}")

    metadata = payload.get("metadata")
    if metadata is None:
        metadata = payload.get("meta_data")
    if isinstance(metadata, dict) and metadata.get("error"):
        message = str(metadata["error"])
        logger.warning("⚠️ cmc api error | endpoint=%s | err=%s", endpoint, message)
        raise ApiError(endpoint, message)

    try:
        envelope = envelope_type.model_validate(payload)
    except ValidationError as exc:
        logger.warning("⚠️ cmc decode error | endpoint=%s | err=%s", endpoint, exc)
        raise DecodeError(endpoint, str(exc)) from exc

    if envelope.metadata.failed:
        raise ApiError(endpoint, envelope.metadata.error or "")
    return envelope


def _resolve_timeout(timeout: Optional[float]) -> float:
    if timeout is None:
        return get_settings().CMC_TIMEOUT_SECONDS
    if timeout <= 0:
        raise InvalidArgumentError(f"timeout must be positive, got {timeout}")
    return float(timeout)


class _BaseClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        *,
        transport: Optional[httpx.BaseTransport | httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or get_settings().CMC_API_URL).rstrip("/")
        self.timeout = _resolve_timeout(timeout)
        self._transport = transport

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r}, timeout={self.timeout})"


# ----------------------------
# blocking client
# ----------------------------
class MarketDataClient(_BaseClient):
    """
    Blocking client. Each call is a single GET with no retries.

    Without `http_client` every call opens and closes its own connection;
    an injected `httpx.Client` is reused and left open for its owner.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(base_url, timeout, transport=transport)
        self._http_client = http_client

    def fetch_listings(self) -> List[Listing]:
        return self._get("listings", API_LISTINGS, ListingsResponse)

    def fetch_tickers(self, start: int = 0, limit: int = 0, convert: Optional[str] = "") -> Dict[str, Ticker]:
        params = tickers_params(start, limit, convert)
        return self._get("ticker", API_TICKER, TickersResponse, params)

    def fetch_ticker(self, ticker_id: int) -> Ticker:
        return self._get("ticker/(id)", ticker_path(ticker_id), TickerResponse)

    def fetch_global_data(self, convert: Optional[str] = "") -> GlobalData:
        return self._get("global data", API_GLOBAL, GlobalDataResponse, global_params(convert))

    def _get(
        self,
        endpoint: str,
        path: str,
        envelope_type: Type[EnvelopeT],
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = build_url(self.base_url, path, params)
        t0 = time.monotonic()
        deadline = t0 + self.timeout
        logger.debug("cmc request | endpoint=%s | url=%s", endpoint, url)

        try:
            if self._http_client is not None:
                body = self._exchange(self._http_client, endpoint, url, deadline)
            else:
                with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                    body = self._exchange(client, endpoint, url, deadline)
        except httpx.TimeoutException as exc:
            logger.warning("⚠️ cmc timeout | endpoint=%s | timeout_s=%s", endpoint, self.timeout)
            raise TransportTimeoutError(endpoint, f"timed out after {self.timeout}s") from exc
        except httpx.RequestError as exc:
            logger.warning("⚠️ cmc transport error | endpoint=%s | err=%s", endpoint, exc)
            raise TransportError(endpoint, str(exc) or type(exc).__name__) from exc

        envelope = decode_envelope(endpoint, body, envelope_type)
        dt_ms = int((time.monotonic() - t0) * 1000)
        logger.info("✅ cmc request done | endpoint=%s | %dms", endpoint, dt_ms)
        return envelope.data

    def _exchange(self, client: httpx.Client, endpoint: str, url: str, deadline: float) -> bytes:
        timeout = _time_left(deadline)
        with client.stream("GET", url, headers=REQUEST_HEADERS, timeout=timeout) as response:
            # httpx timeouts are per read; several slow reads can pass the deadline
            _check_deadline(deadline, response.request)
            _check_status(endpoint, response)
            chunks: List[bytes] = []
            for chunk in response.iter_bytes():
                _check_deadline(deadline, response.request)
                chunks.append(chunk)
            _check_deadline(deadline, response.request)
            return b"".join(chunks)


# ----------------------------
# asyncio client
# ----------------------------
class AsyncMarketDataClient(_BaseClient):
    """Same operations as `MarketDataClient`, as coroutines."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout, transport=transport)
        self._http_client = http_client

    async def fetch_listings(self) -> List[Listing]:
        return await self._get("listings", API_LISTINGS, ListingsResponse)

    async def fetch_tickers(
        self, start: int = 0, limit: int = 0, convert: Optional[str] = ""
    ) -> Dict[str, Ticker]:
        params = tickers_params(start, limit, convert)
        return await self._get("ticker", API_TICKER, TickersResponse, params)

    async def fetch_ticker(self, ticker_id: int) -> Ticker:
        return await self._get("ticker/(id)", ticker_path(ticker_id), TickerResponse)

    async def fetch_global_data(self, convert: Optional[str] = "") -> GlobalData:
        return await self._get("global data", API_GLOBAL, GlobalDataResponse, global_params(convert))

    async def _get(
        self,
        endpoint: str,
        path: str,
        envelope_type: Type[EnvelopeT],
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = build_url(self.base_url, path, params)
        t0 = time.monotonic()
        logger.debug("cmc request | endpoint=%s | url=%s", endpoint, url)

        try:
            body = await asyncio.wait_for(self._round_trip(endpoint, url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("⚠️ cmc timeout | endpoint=%s | timeout_s=%s", endpoint, self.timeout)
            raise TransportTimeoutError(endpoint, f"timed out after {self.timeout}s") from exc
        except httpx.RequestError as exc:
            logger.warning("⚠️ cmc transport error | endpoint=%s | err=%s", endpoint, exc)
            raise TransportError(endpoint, str(exc) or type(exc).__name__) from exc

        envelope = decode_envelope(endpoint, body, envelope_type)
        dt_ms = int((time.monotonic() - t0) * 1000)
        logger.info("✅ cmc request done | endpoint=%s | %dms", endpoint, dt_ms)
        return envelope.data

    async def _round_trip(self, endpoint: str, url: str) -> bytes:
        if self._http_client is not None:
            return await self._exchange(self._http_client, endpoint, url)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await self._exchange(client, endpoint, url)

    async def _exchange(self, client: httpx.AsyncClient, endpoint: str, url: str) -> bytes:
        async with client.stream("GET", url, headers=REQUEST_HEADERS, timeout=self.timeout) as response:
            _check_status(endpoint, response)
            return await response.aread()


# ----------------------------
# one-shot helpers
# ----------------------------
def fetch_listings() -> List[Listing]:
    return MarketDataClient().fetch_listings()


def fetch_tickers(start: int = 0, limit: int = 0, convert: Optional[str] = "") -> Dict[str, Ticker]:
    return MarketDataClient().fetch_tickers(start, limit, convert)


def fetch_ticker(ticker_id: int) -> Ticker:
    return MarketDataClient().fetch_ticker(ticker_id)


def fetch_global_data(convert: Optional[str] = "") -> GlobalData:
    return MarketDataClient().fetch_global_data(convert)
