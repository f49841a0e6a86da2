import os
import unittest
from datetime import time
from unittest.mock import patch

from pydantic import ValidationError

from hidticker.config.settings import Settings


class TestSettings(unittest.TestCase):
    def test_defaults_load_without_env(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()

        self.assertEqual(settings.TICKER_SYMBOLS, ["NVDA", "TSLA"])
        self.assertEqual(settings.QUOTE_SOURCE, "api")
        self.assertIsNone(settings.QUOTE_API_KEY)
        self.assertEqual(settings.HID_VENDOR_ID, 0x8D1D)
        self.assertEqual(settings.HID_PRODUCT_ID, 0x9D9D)
        self.assertEqual(settings.HID_USAGE, 0x61)
        self.assertEqual(settings.HID_USAGE_PAGE, 0xFF60)
        self.assertEqual(settings.HID_REPORT_SIZE, 32)
        self.assertEqual(settings.MARKET_OPEN_UTC, time(14, 30))

    def test_symbols_parse_comma_separated_values(self):
        with patch.dict(os.environ, {"TICKER_SYMBOLS": " TSLA, EURONEXT-VWRL , ,GOLD "}, clear=True):
            settings = Settings.from_env()

        self.assertEqual(settings.TICKER_SYMBOLS, ["TSLA", "EURONEXT-VWRL", "GOLD"])

    def test_decimal_and_hex_ids(self):
        env = {"HID_VENDOR_ID": "1234", "HID_USAGE_PAGE": "0xFF00"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()

        self.assertEqual(settings.HID_VENDOR_ID, 1234)
        self.assertEqual(settings.HID_USAGE_PAGE, 0xFF00)

    def test_invalid_values_fail_validation(self):
        for env in (
            {"QUOTE_SOURCE": "telepathy"},
            {"HID_VENDOR_ID": "zz"},
            {"HID_REPORT_SIZE": "0"},
            {"MARKET_OPEN_UTC": "25:00"},
            {"REFRESH_OPEN_SEC": "-60"},
            {"REFRESH_OPEN_SEC": "0"},
            {"REFRESH_CLOSED_SEC": "nan"},
            {"PRE_OPEN_BUFFER_SEC": "-1"},
            {"HTTP_TIMEOUT_SEC": "0"},
            {"MARKET_OPEN_UTC": "22:00", "MARKET_CLOSE_UTC": "10:00"},
            {"MARKET_OPEN_UTC": "14:30", "MARKET_CLOSE_UTC": "14:30"},
            {"PRICE_FILE_COMMAND": "npx tsx \"pull.ts"},
        ):
            with patch.dict(os.environ, env, clear=True):
                with self.assertRaises(ValidationError, msg=str(env)):
                    Settings.from_env()

    def test_blank_api_key_is_none(self):
        with patch.dict(os.environ, {"QUOTE_API_KEY": "  "}, clear=True):
            self.assertIsNone(Settings.from_env().QUOTE_API_KEY)

    def test_derived_schedule_and_target(self):
        env = {
            "MARKET_OPEN_UTC": "13:30",
            "REFRESH_OPEN_SEC": "60",
            "HID_REPORT_SIZE": "64",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()

        schedule = settings.market_schedule()
        target = settings.device_target()
        self.assertEqual(schedule.open_time, time(13, 30))
        self.assertEqual(schedule.open_interval_sec, 60.0)
        self.assertEqual(target.report_size, 64)
        self.assertEqual(target.usage_page, 0xFF60)

    def test_settings_are_immutable(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()
        with self.assertRaises(ValidationError):
            settings.QUOTE_SOURCE = "file"


if __name__ == "__main__":
    unittest.main()
