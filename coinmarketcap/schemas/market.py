"""Pydantic models for CoinMarketCap v2 response payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class _Record(BaseModel):
    # unknown fields are ignored so newer API payloads still decode
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Listing(_Record):
    """One currency in the catalog."""

    id: int = 0
    name: str = ""
    symbol: str = ""
    website_slug: str = ""

    @field_validator("name", "symbol", "website_slug", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Quote(_Record):
    """Market figures for a ticker, denominated in one quote currency."""

    price: float = 0.0
    volume_24h: float = 0.0
    market_cap: float = 0.0
    percent_change_1h: float = Field(
        0.0, validation_alias=AliasChoices("percent_change_1h", "price_change_1h")
    )
    percent_change_24h: float = Field(
        0.0, validation_alias=AliasChoices("percent_change_24h", "price_change_24h")
    )
    percent_change_7d: float = Field(
        0.0, validation_alias=AliasChoices("percent_change_7d", "price_change_7d")
    )

    @field_validator(
        "price",
        "volume_24h",
        "market_cap",
        "percent_change_1h",
        "percent_change_24h",
        "percent_change_7d",
        mode="before",
    )
    @classmethod
    def null_as_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class Ticker(_Record):
    """
    Market snapshot of a single currency.

    Supplies of 0 mean the server reported them as unknown or unbounded.
    `quotes` is keyed by quote currency code, e.g. "USD".
    """

    id: int = 0
    name: str = ""
    symbol: str = ""
    website_slug: str = ""
    rank: int = 0
    circulating_supply: float = 0.0
    total_supply: float = 0.0
    max_supply: float = 0.0
    quotes: Dict[str, Quote] = Field(default_factory=dict)
    last_updated: int = 0

    @field_validator("name", "symbol", "website_slug", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator(
        "id",
        "rank",
        "circulating_supply",
        "total_supply",
        "max_supply",
        "last_updated",
        mode="before",
    )
    @classmethod
    def null_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("quotes", mode="before")
    @classmethod
    def null_quotes(cls, value: Any) -> Any:
        return {} if value is None else value


class GlobalQuote(_Record):
    total_market_cap: float = 0.0
    total_volume_24h: float = 0.0

    @field_validator("total_market_cap", "total_volume_24h", mode="before")
    @classmethod
    def null_as_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class GlobalData(_Record):
    """Aggregate statistics across the whole market."""

    active_cryptocurrencies: int = 0
    active_markets: int = 0
    bitcoin_percentage_of_market_cap: float = 0.0
    quotes: Dict[str, GlobalQuote] = Field(default_factory=dict)
    last_updated: int = Field(0, validation_alias=AliasChoices("last_updated", "last_updated_at"))

    @field_validator(
        "active_cryptocurrencies",
        "active_markets",
        "bitcoin_percentage_of_market_cap",
        "last_updated",
        mode="before",
    )
    @classmethod
    def null_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("quotes", mode="before")
    @classmethod
    def null_quotes(cls, value: Any) -> Any:
        return {} if value is None else value


class MetaData(_Record):
    timestamp: int = 0
    num_cryptocurrencies: Optional[int] = None
    error: Optional[str] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def null_timestamp(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("num_cryptocurrencies", mode="before")
    @classmethod
    def blank_count(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("error", mode="before")
    @classmethod
    def error_as_text(cls, value: Any) -> Any:
        if not value:
            return None
        return value if isinstance(value, str) else str(value)

    @property
    def failed(self) -> bool:
        return bool(self.error)


# ---------- Envelopes ----------


class ResponseEnvelope(_Record):
    # the global endpoint historically answered with "meta_data"
    metadata: MetaData = Field(
        default_factory=MetaData,
        validation_alias=AliasChoices("metadata", "meta_data"),
    )

    @field_validator("metadata", mode="before")
    @classmethod
    def null_metadata(cls, value: Any) -> Any:
        return {} if value is None else value


class ListingsResponse(ResponseEnvelope):
    data: List[Listing] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def null_data(cls, value: Any) -> Any:
        return [] if value is None else value


class TickersResponse(ResponseEnvelope):
    data: Dict[str, Ticker] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def null_data(cls, value: Any) -> Any:
        return {} if value is None else value


class TickerResponse(ResponseEnvelope):
    data: Ticker = Field(default_factory=Ticker)

    @field_validator("data", mode="before")
    @classmethod
    def null_data(cls, value: Any) -> Any:
        return {} if value is None else value


class GlobalDataResponse(ResponseEnvelope):
    data: GlobalData = Field(default_factory=GlobalData)

    @field_validator("data", mode="before")
    @classmethod
    def null_data(cls, value: Any) -> Any:
        return {} if value is None else value
