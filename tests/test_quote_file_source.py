import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from hidticker.errors import FetchFailure
from hidticker.integrations.quote_file import PriceFileSource, parse_price_lines
from hidticker.schemas.ticker import TickerSet


class TestParsePriceLines(unittest.TestCase):
    def test_parses_scraper_output(self):
        rows = parse_price_lines("VWRL:118$\nTSLA: 431$\n\nGOLD: ERROR\ngarbage\n")
        self.assertEqual(rows, {"VWRL": "118$", "TSLA": "431$", "GOLD": "ERROR"})


class TestPriceFileSource(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "prices.txt"

    def tearDown(self):
        self._tmp.cleanup()

    def test_reads_prices_and_aliases(self):
        self.path.write_text("VWRL:118$\nTSLA:431$\n", encoding="utf-8")
        tickers = TickerSet(["EURONEXT-VWRL", "TSLA"])

        PriceFileSource(self.path).fetch(tickers)

        self.assertEqual(tickers.as_dict(), {"EURONEXT-VWRL": 118.0, "TSLA": 431.0})

    def test_error_and_missing_lines_keep_previous_value(self):
        self.path.write_text("GOLD: ERROR\nTSLA:431$\n", encoding="utf-8")
        tickers = TickerSet.from_prices({"GOLD": 2600.0, "NVDA": 180.0, "TSLA": 400.0})

        PriceFileSource(self.path).fetch(tickers)

        self.assertEqual(tickers.as_dict(), {"GOLD": 2600.0, "NVDA": 180.0, "TSLA": 431.0})

    def test_missing_file_degrades_every_symbol(self):
        tickers = TickerSet.from_prices({"TSLA": 400.0})
        source = PriceFileSource(self.path)

        source.fetch(tickers)

        self.assertEqual(tickers["TSLA"], 400.0)
        with self.assertRaises(FetchFailure):
            source.get_price("TSLA")

    def test_undecodable_file_degrades_every_symbol(self):
        # scraper interrupted mid-write, leaving a truncated multibyte character
        self.path.write_bytes(b"TSLA:431$\nNVDA:\xe2\x82")
        tickers = TickerSet.from_prices({"NVDA": 180.0, "TSLA": 400.0})
        source = PriceFileSource(self.path)

        result = source.fetch(tickers)

        self.assertIs(result, tickers)
        self.assertEqual(tickers.as_dict(), {"NVDA": 180.0, "TSLA": 400.0})
        with self.assertRaises(FetchFailure):
            source.get_price("TSLA")

    def test_command_runs_before_reading(self):
        def runner(args, **kwargs):
            self.path.write_text("TSLA:432$\n", encoding="utf-8")
            return subprocess.CompletedProcess(args, 0)

        runner_mock = MagicMock(side_effect=runner)
        source = PriceFileSource(self.path, command="npx tsx pull.ts", command_timeout=30, runner=runner_mock)
        tickers = TickerSet(["TSLA"])

        source.fetch(tickers)

        self.assertEqual(tickers["TSLA"], 432.0)
        args, kwargs = runner_mock.call_args
        self.assertEqual(args[0], ["npx", "tsx", "pull.ts"])
        self.assertEqual(kwargs["timeout"], 30)

    def test_failed_command_still_reads_previous_file(self):
        self.path.write_text("TSLA:430$\n", encoding="utf-8")
        runner = MagicMock(return_value=subprocess.CompletedProcess(["x"], 1))
        tickers = TickerSet(["TSLA"])

        PriceFileSource(self.path, command="x", runner=runner).fetch(tickers)

        self.assertEqual(tickers["TSLA"], 430.0)

    def test_command_timeout_is_not_fatal(self):
        self.path.write_text("TSLA:430$\n", encoding="utf-8")
        runner = MagicMock(side_effect=subprocess.TimeoutExpired("x", 1))
        tickers = TickerSet(["TSLA"])

        PriceFileSource(self.path, command="x", runner=runner).fetch(tickers)

        self.assertEqual(tickers["TSLA"], 430.0)


if __name__ == "__main__":
    unittest.main()
