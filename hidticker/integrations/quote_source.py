from __future__ import annotations

import math
from typing import TYPE_CHECKING

import requests

from hidticker.errors import FetchFailure
from hidticker.schemas.ticker import TickerSet

if TYPE_CHECKING:
    from hidticker.config.settings import Settings

# per-symbol failures that leave the previous price in place
RECOVERABLE_ERRORS = (FetchFailure, requests.RequestException, OSError, ValueError, KeyError, TypeError)


def parse_price(text: str) -> float:
    """Parse a provider price string such as ``"1,234.50"`` or ``"500$"``."""
    cleaned = str(text).strip().replace(",", "").rstrip("$€").strip()
    if not cleaned:
        raise FetchFailure("empty price text")
    try:
        price = float(cleaned)
    except ValueError as exc:
        raise FetchFailure(f"invalid price text: {text!r}") from exc
    if not math.isfinite(price):
        raise FetchFailure(f"non-finite price: {text!r}")
    if price < 0:
        raise FetchFailure(f"negative price: {price}")
    return price


class QuoteSource:
    """Fills a TickerSet in place, one provider call per symbol."""

    name = "base"

    def check_ready(self) -> None:
        """Raise SystemicConfigError when no symbol can possibly be fetched."""

    def prepare(self, symbols: list[str]) -> None:
        """Hook run once per batch before the per-symbol calls."""

    def get_price(self, symbol: str) -> float:
        raise NotImplementedError

    def fetch(self, tickers: TickerSet) -> TickerSet:
        self.check_ready()
        symbols = tickers.symbols()
        self.prepare(symbols)

        updated = 0
        failed: list[str] = []
        for symbol in symbols:
            try:
                price = self.get_price(symbol)
            except RECOVERABLE_ERRORS as exc:
                failed.append(symbol)
                print(
                    f"[QUOTE][fetch_error] source={self.name} symbol={symbol} "
                    f"kept={tickers[symbol]} error={exc}",
                    flush=True,
                )
                continue
            tickers[symbol] = price
            updated += 1

        print(
            "[QUOTE][batch_resolve] "
            f"source={self.name} target_count={len(symbols)} updated_count={updated} "
            f"failed={','.join(failed) or '-'}",
            flush=True,
        )
        return tickers


def create_quote_source(settings: "Settings", *, session=None) -> QuoteSource:
    from hidticker.integrations.quote_api import QuoteApiClient
    from hidticker.integrations.quote_file import PriceFileSource
    from hidticker.integrations.quote_scrape import QuoteScrapeClient

    if settings.QUOTE_SOURCE == "api":
        return QuoteApiClient(
            api_key=settings.QUOTE_API_KEY,
            base_url=settings.QUOTE_API_BASE_URL,
            timeout=settings.HTTP_TIMEOUT_SEC,
            session=session,
        )
    if settings.QUOTE_SOURCE == "scrape":
        return QuoteScrapeClient(
            url_template=settings.QUOTE_SCRAPE_URL,
            pattern=settings.QUOTE_SCRAPE_PATTERN,
            timeout=settings.HTTP_TIMEOUT_SEC,
            session=session,
        )
    if settings.QUOTE_SOURCE == "file":
        return PriceFileSource(
            path=settings.PRICE_FILE_PATH,
            command=settings.PRICE_FILE_COMMAND,
            command_timeout=settings.PRICE_FILE_COMMAND_TIMEOUT_SEC,
        )
    raise ValueError(f"unknown quote source: {settings.QUOTE_SOURCE}")
