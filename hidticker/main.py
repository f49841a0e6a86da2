from __future__ import annotations

import signal
import sys

from pydantic import ValidationError

from hidticker.config.settings import Settings, get_settings
from hidticker.integrations.quote_source import create_quote_source
from hidticker.schemas.ticker import TickerSet
from hidticker.services.cycle_orchestrator import CycleOrchestrator
from hidticker.services.device_session import DeviceSession


def build_orchestrator(settings: Settings) -> CycleOrchestrator:
    return CycleOrchestrator(
        tickers=TickerSet(settings.TICKER_SYMBOLS),
        quote_source=create_quote_source(settings),
        device_session=DeviceSession(target=settings.device_target()),
        schedule=settings.market_schedule(),
    )


def main() -> int:
    try:
        settings = get_settings()
        orchestrator = build_orchestrator(settings)
    except (ValidationError, ValueError) as exc:
        print(f"[BOOT][config_error] {exc}", file=sys.stderr, flush=True)
        return 2

    target = settings.device_target()
    print(
        f"[BOOT][start] source={settings.QUOTE_SOURCE} symbols={','.join(orchestrator.tickers)} "
        f"device={target.vendor_id:04x}:{target.product_id:04x} report_size={target.report_size}",
        flush=True,
    )

    def _handle_stop(signum, _frame) -> None:
        print(f"[BOOT][stop] signal={signum}", flush=True)
        orchestrator.stop()

    signal.signal(signal.SIGINT, _handle_stop)
    signal.signal(signal.SIGTERM, _handle_stop)

    orchestrator.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
