from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable

from hidticker.integrations.quote_source import QuoteSource
from hidticker.schemas.cycle import CycleResult
from hidticker.schemas.refresh import MarketSchedule, RefreshDecision
from hidticker.schemas.ticker import TickerSet
from hidticker.services import market_hours
from hidticker.services.device_session import DeviceSession
from hidticker.services.display_encoder import encode, render_text


class CycleOrchestrator:
    """Runs fetch -> encode -> send, then sleeps for the refresh policy's wait."""

    def __init__(
        self,
        *,
        tickers: TickerSet,
        quote_source: QuoteSource,
        device_session: DeviceSession,
        schedule: MarketSchedule | None = None,
        clock: Callable[[], datetime] | None = None,
        sleep_fn: Callable[[float], object] | None = None,
    ) -> None:
        self.tickers = tickers
        self.quote_source = quote_source
        self.device_session = device_session
        self.schedule = schedule or market_hours.DEFAULT_SCHEDULE
        self.clock = clock or (lambda: datetime.now(market_hours.UTC))
        self._stop_event = threading.Event()
        self._sleep_fn = sleep_fn or self._stop_event.wait
        self.state = "IDLE"
        self._metrics = {
            "cycles": 0,
            "ok": 0,
            "failed": 0,
        }
        self.last_state: str | None = None
        self.last_wait_sec: float | None = None
        self.last_error: str | None = None

    def _failed(self, stage: str, reason: str, send_status=None) -> CycleResult:
        self.last_error = reason
        print(f"[CYCLE][cycle_failed] stage={stage} reason={reason}", flush=True)
        return CycleResult(ok=False, stage=stage, reason=reason, send_status=send_status)

    def _run_stages(self) -> CycleResult:
        try:
            self.quote_source.fetch(self.tickers)
        except Exception as exc:
            return self._failed("fetch", f"{type(exc).__name__}: {exc}")

        try:
            buffer = encode(self.tickers, self.device_session.target.report_size)
        except Exception as exc:
            return self._failed("encode", f"{type(exc).__name__}: {exc}")
        print(f"[CYCLE][encoded] text={render_text(self.tickers)!r} size={len(buffer)}", flush=True)

        try:
            result = self.device_session.send(buffer)
        except Exception as exc:
            return self._failed("send", f"{type(exc).__name__}: {exc}")
        if not result.ok:
            return self._failed("send", result.reason or result.status, send_status=result.status)

        self.last_error = None
        return CycleResult(ok=True, stage="done", send_status=result.status)

    def next_decision(self) -> RefreshDecision:
        return market_hours.decide(self.clock(), self.schedule)

    def run_once(self) -> CycleResult:
        self.state = "RUNNING"
        try:
            result = self._run_stages()
        finally:
            self.state = "IDLE"

        self._metrics["cycles"] += 1
        if result.ok:
            self._metrics["ok"] += 1
        else:
            self._metrics["failed"] += 1

        decision = self.next_decision()
        self.last_state = decision.state
        self.last_wait_sec = decision.wait_sec
        print(
            f"[CYCLE][cycle_done] ok={int(result.ok)} state={decision.state} "
            f"wait_sec={decision.wait_sec:.0f} next_open={decision.next_open}",
            flush=True,
        )
        return result.model_copy(update={"decision": decision})

    def startup_check(self) -> bool:
        present = self.device_session.is_present()
        if not present:
            print("[BOOT][device_missing] warning=device not connected, will retry each cycle", flush=True)
        else:
            print("[BOOT][device_found]", flush=True)
        return present

    def run_forever(self, *, max_cycles: int | None = None) -> int:
        """Loop until stopped. Returns the number of cycles run."""
        self._stop_event.clear()
        self.startup_check()
        cycles = 0
        while not self._stop_event.is_set():
            result = self.run_once()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            self._sleep_fn(result.decision.wait_sec)
        return cycles

    def stop(self) -> None:
        self._stop_event.set()

    def metrics(self) -> dict:
        return {
            **self._metrics,
            "state": self.state,
            "last_state": self.last_state,
            "last_wait_sec": self.last_wait_sec,
            "last_error": self.last_error,
        }
