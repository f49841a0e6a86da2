"""Error taxonomy for the ticker display pipeline."""

from __future__ import annotations


class TickerDisplayError(RuntimeError):
    """Base class for all domain-specific exceptions."""


class FetchFailure(TickerDisplayError):
    """A single symbol could not be fetched or parsed. Recovered in place."""


class SystemicConfigError(TickerDisplayError):
    """A precondition for the whole fetch is missing, e.g. an absent API key."""


class DeviceNotFound(TickerDisplayError):
    """No connected HID interface matches the configured target."""


class TransportError(TickerDisplayError):
    """Opening or writing the HID device failed."""
