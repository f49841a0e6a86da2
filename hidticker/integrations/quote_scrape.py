from __future__ import annotations

import re
from typing import Any, Optional

import requests

from hidticker.errors import FetchFailure
from hidticker.integrations.quote_source import QuoteSource, parse_price

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class QuoteScrapeClient(QuoteSource):
    """Scrapes a quote page and pulls the price out with a regex."""

    name = "scrape"

    def __init__(
        self,
        url_template: str,
        pattern: str,
        timeout: float = 5,
        session: Optional[Any] = None,
    ) -> None:
        if "{symbol}" not in url_template:
            raise ValueError("url_template must contain {symbol}")
        self.url_template = url_template
        self.pattern = re.compile(pattern)
        if self.pattern.groups < 1:
            raise ValueError("pattern must have a capture group for the price")
        self.timeout = timeout
        self.session = session or requests

    def fetch_page(self, symbol: str) -> str:
        response = self.session.get(
            self.url_template.format(symbol=symbol),
            headers={"user-agent": _USER_AGENT},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.text

    def get_price(self, symbol: str) -> float:
        match = self.pattern.search(self.fetch_page(symbol))
        if match is None:
            raise FetchFailure(f"price not found on page for {symbol}")
        return parse_price(match.group(1))
