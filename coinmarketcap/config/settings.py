from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_API_URL = "https://api.coinmarketcap.com/v2"
DEFAULT_TIMEOUT_SECONDS = 10.0


def parse_str(value: str | None, default: str) -> str:
    if value is None or value.strip() == "":
        return default
    return value.strip()


def parse_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    parsed = float(value)
    if parsed <= 0:
        raise ValueError(f"Timeout must be positive, got {value!r}")
    return parsed


@dataclass(frozen=True)
class Settings:
    CMC_API_URL: str
    CMC_TIMEOUT_SECONDS: float
    CMC_LOG_LEVEL: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            CMC_API_URL=parse_str(os.getenv("CMC_API_URL"), DEFAULT_API_URL).rstrip("/"),
            CMC_TIMEOUT_SECONDS=parse_float(os.getenv("CMC_TIMEOUT_SECONDS"), DEFAULT_TIMEOUT_SECONDS),
            CMC_LOG_LEVEL=parse_str(os.getenv("CMC_LOG_LEVEL"), "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
