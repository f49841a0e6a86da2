import os
import unittest
from unittest.mock import patch

from hidticker.config.settings import Settings, get_settings
from hidticker.integrations.quote_file import PriceFileSource
from hidticker.main import build_orchestrator, main


class TestBootstrap(unittest.TestCase):
    def tearDown(self):
        get_settings.cache_clear()

    def test_build_orchestrator_wires_configuration(self):
        env = {"QUOTE_SOURCE": "file", "TICKER_SYMBOLS": "TSLA,NVDA", "HID_REPORT_SIZE": "64"}
        with patch.dict(os.environ, env, clear=True):
            orchestrator = build_orchestrator(Settings.from_env())

        self.assertIsInstance(orchestrator.quote_source, PriceFileSource)
        self.assertEqual(list(orchestrator.tickers), ["NVDA", "TSLA"])
        self.assertEqual(orchestrator.device_session.target.report_size, 64)
        self.assertEqual(orchestrator.state, "IDLE")

    def test_startup_misconfiguration_exits_with_status_2(self):
        get_settings.cache_clear()
        with patch.dict(os.environ, {"HID_REPORT_SIZE": "-1"}, clear=True):
            self.assertEqual(main(), 2)


if __name__ == "__main__":
    unittest.main()
