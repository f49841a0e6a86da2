from __future__ import annotations

from hidticker.schemas.ticker import TickerSet

LINE_SEPARATOR = "\n"
DEFAULT_REPORT_SIZE = 32


def render_line(symbol: str, price: float) -> str:
    return f"{symbol}: {price:.0f}$"


def render_text(tickers: TickerSet) -> str:
    """Unpadded display text, one ``SYMBOL: PRICE$`` line per ticker."""
    return LINE_SEPARATOR.join(render_line(symbol, price) for symbol, price in tickers.items())


def encode(tickers: TickerSet, size: int = DEFAULT_REPORT_SIZE) -> bytes:
    """Render ``tickers`` into exactly ``size`` bytes.

    Short text is zero-padded on the right; long text is cut at the byte
    offset, even if that splits a line.
    """
    if size <= 0:
        raise ValueError("size must be positive")
    raw = render_text(tickers).encode("utf-8")
    return raw[:size].ljust(size, b"\x00")
