# coinmarketcap/main.py
from __future__ import annotations

from fastapi import FastAPI

from coinmarketcap.api.market import router as market_router


app = FastAPI(title="CoinMarketCap Market Data")

app.include_router(market_router)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "CoinMarketCap market data proxy"}
