from __future__ import annotations

from typing import Iterable, Iterator


class TickerSet:
    """Symbol -> last known price. Keys are fixed; iteration is lexicographic."""

    def __init__(self, symbols: Iterable[str], *, default: float = 0.0) -> None:
        self._prices: dict[str, float] = {}
        for symbol in symbols:
            value = str(symbol).strip()
            if not value or value in self._prices:
                continue
            self._prices[value] = float(default)
        self._order = sorted(self._prices)

    @classmethod
    def from_prices(cls, prices: dict[str, float]) -> "TickerSet":
        tickers = cls(prices.keys())
        for symbol, price in prices.items():
            key = symbol.strip()
            if key in tickers:
                tickers[key] = price
        return tickers

    def __getitem__(self, symbol: str) -> float:
        return self._prices[symbol]

    def __setitem__(self, symbol: str, price: float) -> None:
        if symbol not in self._prices:
            raise KeyError(symbol)
        self._prices[symbol] = float(price)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._prices

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        body = ", ".join(f"{s}={self._prices[s]}" for s in self._order)
        return f"TickerSet({body})"

    def symbols(self) -> list[str]:
        return list(self._order)

    def items(self) -> list[tuple[str, float]]:
        return [(s, self._prices[s]) for s in self._order]

    def as_dict(self) -> dict[str, float]:
        return dict(self.items())
