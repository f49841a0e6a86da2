from __future__ import annotations

import math
from typing import Any, Optional

import requests

from hidticker.errors import FetchFailure, SystemicConfigError
from hidticker.integrations.quote_source import QuoteSource


class QuoteApiClient(QuoteSource):
    """Structured JSON quote API (Finnhub-style ``/quote`` endpoint)."""

    name = "api"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://finnhub.io/api/v1",
        timeout: float = 5,
        session: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests

    def check_ready(self) -> None:
        if not self.api_key:
            raise SystemicConfigError("QUOTE_API_KEY is not set")

    def get_quote(self, symbol: str) -> dict[str, Any]:
        response = self.session.get(
            f"{self.base_url}/quote",
            params={"symbol": symbol, "token": self.api_key},
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise FetchFailure(f"unexpected payload for {symbol}")
        return payload

    def get_price(self, symbol: str) -> float:
        payload = self.get_quote(symbol)
        raw = payload.get("c")
        if raw is None or raw == "":
            raise FetchFailure(f"missing price for {symbol}")
        try:
            price = float(raw)
        except (TypeError, ValueError) as exc:
            raise FetchFailure(f"invalid price for {symbol}: {raw!r}") from exc
        if not math.isfinite(price):
            raise FetchFailure(f"invalid price for {symbol}: {raw!r}")
        # the provider answers unknown symbols with an all-zero quote
        if price <= 0:
            raise FetchFailure(f"no quote for {symbol}")
        return price
