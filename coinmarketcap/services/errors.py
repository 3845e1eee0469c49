"""Error hierarchy for the CoinMarketCap client."""

from __future__ import annotations


class CoinMarketCapError(Exception):
    """Base error for every failure surfaced by the client."""


class InvalidArgumentError(CoinMarketCapError, ValueError):
    """Raised for bad caller input, before any request is sent."""


class TransportError(CoinMarketCapError):
    """Raised when the HTTP exchange itself fails (DNS, connect, read)."""

    def __init__(self, endpoint: str, message: str):
        super().__init__(f"{endpoint} request failed: {message}")
        self.endpoint = endpoint


class TransportTimeoutError(TransportError):
    """Raised when the round trip exceeds the configured timeout."""


class HttpStatusError(CoinMarketCapError):
    def __init__(self, endpoint: str, status_code: int):
        super().__init__(
            f"something went wrong with {endpoint} API and the response code is {status_code}"
        )
        self.endpoint = endpoint
        self.status_code = status_code


class DecodeError(CoinMarketCapError):
    """Raised when the body is not valid JSON or does not fit the envelope."""

    def __init__(self, endpoint: str, message: str):
        super().__init__(f"could not decode {endpoint} response: {message}")
        self.endpoint = endpoint


class ApiError(CoinMarketCapError):
    """Raised when a well-formed response reports an error in its metadata."""

    def __init__(self, endpoint: str, message: str):
        super().__init__(message)
        self.endpoint = endpoint
        self.message = message
