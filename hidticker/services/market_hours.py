from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from hidticker.schemas.refresh import MarketSchedule, RefreshDecision

UTC = ZoneInfo("UTC")
_SATURDAY = 5
_SUNDAY = 6

DEFAULT_SCHEDULE = MarketSchedule()


def _to_utc(now: datetime | None) -> datetime:
    current = now or datetime.now(UTC)
    if current.tzinfo is None:
        return current.replace(tzinfo=UTC)
    return current.astimezone(UTC)


def _is_weekend(day: date) -> bool:
    return day.weekday() in (_SATURDAY, _SUNDAY)


def _skip_weekend(day: date) -> date:
    if day.weekday() == _SATURDAY:
        return day + timedelta(days=2)
    if day.weekday() == _SUNDAY:
        return day + timedelta(days=1)
    return day


def _minutes(value) -> int:
    return value.hour * 60 + value.minute


def is_market_open(now: datetime | None = None, schedule: MarketSchedule = DEFAULT_SCHEDULE) -> bool:
    """Return whether the weekly UTC market window is open at ``now``."""
    current = _to_utc(now)
    if _is_weekend(current.date()):
        return False
    minutes = _minutes(current)
    return _minutes(schedule.open_time) <= minutes < _minutes(schedule.close_time)


def next_market_open(now: datetime | None = None, schedule: MarketSchedule = DEFAULT_SCHEDULE) -> datetime:
    """First weekday open strictly after ``now``.

    Weekends are skipped twice: once before trying today's open and again after
    advancing past it, so Friday evening rolls to Monday rather than Saturday.
    """
    current = _to_utc(now)
    day = _skip_weekend(current.date())
    candidate = datetime.combine(day, schedule.open_time, tzinfo=UTC)
    if candidate <= current:
        day = _skip_weekend(day + timedelta(days=1))
        candidate = datetime.combine(day, schedule.open_time, tzinfo=UTC)
    return candidate


def decide(now: datetime | None = None, schedule: MarketSchedule = DEFAULT_SCHEDULE) -> RefreshDecision:
    current = _to_utc(now)
    if is_market_open(current, schedule):
        return RefreshDecision(state="MARKET_OPEN", wait_sec=schedule.open_interval_sec)

    next_open = next_market_open(current, schedule)
    remaining = (next_open - current).total_seconds()
    weekend = _is_weekend(current.date())

    if remaining < schedule.pre_open_window_sec:
        return RefreshDecision(
            state="MARKET_CLOSED" if weekend else "PRE_OPEN",
            wait_sec=remaining + schedule.pre_open_buffer_sec,
            next_open=next_open,
        )
    return RefreshDecision(
        state="MARKET_CLOSED",
        wait_sec=schedule.closed_interval_sec,
        next_open=next_open,
    )
