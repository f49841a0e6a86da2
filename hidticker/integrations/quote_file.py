from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Callable

from hidticker.errors import FetchFailure
from hidticker.integrations.quote_source import QuoteSource, parse_price


def parse_price_lines(text: str) -> dict[str, str]:
    """Parse ``SYMBOL:PRICE$`` lines into symbol -> raw price text.

    Blank and malformed lines are skipped; the last line for a symbol wins.
    """
    rows: dict[str, str] = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        symbol, _, value = line.partition(":")
        symbol = symbol.strip()
        if not symbol:
            continue
        rows[symbol] = value.strip()
    return rows


def _alias(symbol: str) -> str:
    # exchange-qualified symbols are written under their short name
    return symbol.rsplit("-", 1)[-1]


class PriceFileSource(QuoteSource):
    """Reads a price file produced by an external scraper command."""

    name = "file"

    def __init__(
        self,
        path: str | Path,
        command: str = "",
        command_timeout: float = 120,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.path = Path(path)
        self.command = command.strip()
        self.command_timeout = command_timeout
        self._runner = runner
        self._rows: dict[str, str] = {}
        self._read_error: str | None = None

    def run_command(self) -> bool:
        if not self.command:
            return True
        try:
            completed = self._runner(
                shlex.split(self.command),
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            print(f"[QUOTE][file_command_error] command={self.command!r} error={exc}", flush=True)
            return False
        if completed.returncode != 0:
            print(
                f"[QUOTE][file_command_error] command={self.command!r} "
                f"returncode={completed.returncode}",
                flush=True,
            )
            return False
        return True

    def prepare(self, symbols: list[str]) -> None:
        # a failed refresh still leaves the previous file readable
        self.run_command()
        try:
            self._rows = parse_price_lines(self.path.read_text(encoding="utf-8"))
            self._read_error = None
        except (OSError, UnicodeDecodeError) as exc:
            self._rows = {}
            self._read_error = str(exc)

    def get_price(self, symbol: str) -> float:
        if self._read_error is not None:
            raise FetchFailure(f"price file unreadable: {self._read_error}")
        raw = self._rows.get(symbol)
        if raw is None:
            raw = self._rows.get(_alias(symbol))
        if raw is None:
            raise FetchFailure(f"{symbol} missing from {self.path}")
        if raw.upper() == "ERROR":
            raise FetchFailure(f"scraper reported error for {symbol}")
        return parse_price(raw)
