import os
import shlex
from datetime import time
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from hidticker.schemas.device import DeviceTarget
from hidticker.schemas.refresh import MarketSchedule

_DEFAULT_SYMBOLS = ["NVDA", "TSLA"]

# splitkb.com vendor and Elora product, QMK raw HID usage
_DEFAULT_VENDOR_ID = "0x8d1d"
_DEFAULT_PRODUCT_ID = "0x9d9d"
_DEFAULT_USAGE = "0x61"
_DEFAULT_USAGE_PAGE = "0xff60"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    TICKER_SYMBOLS: list[str]
    QUOTE_SOURCE: Literal["api", "scrape", "file"]
    QUOTE_API_KEY: str | None = None
    QUOTE_API_BASE_URL: str
    QUOTE_SCRAPE_URL: str
    QUOTE_SCRAPE_PATTERN: str
    PRICE_FILE_PATH: str
    PRICE_FILE_COMMAND: str = ""
    PRICE_FILE_COMMAND_TIMEOUT_SEC: float
    HTTP_TIMEOUT_SEC: float
    HID_VENDOR_ID: int
    HID_PRODUCT_ID: int
    HID_USAGE: int
    HID_USAGE_PAGE: int
    HID_REPORT_SIZE: int
    MARKET_OPEN_UTC: time
    MARKET_CLOSE_UTC: time
    REFRESH_OPEN_SEC: float
    REFRESH_CLOSED_SEC: float
    PRE_OPEN_WINDOW_SEC: float
    PRE_OPEN_BUFFER_SEC: float

    @field_validator("HID_VENDOR_ID", "HID_PRODUCT_ID", "HID_USAGE", "HID_USAGE_PAGE", mode="before")
    @classmethod
    def _parse_int_literal(cls, value):
        # accepts 0x-prefixed hex as well as plain decimal
        if isinstance(value, str):
            return int(value.strip(), 0)
        return value

    @field_validator("MARKET_OPEN_UTC", "MARKET_CLOSE_UTC", mode="before")
    @classmethod
    def _parse_wall_time(cls, value):
        if isinstance(value, str):
            return time.fromisoformat(value.strip())
        return value

    @field_validator("HID_REPORT_SIZE")
    @classmethod
    def _positive_report_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("HID_REPORT_SIZE must be positive")
        return value

    @field_validator(
        "REFRESH_OPEN_SEC",
        "REFRESH_CLOSED_SEC",
        "PRE_OPEN_WINDOW_SEC",
        "PRE_OPEN_BUFFER_SEC",
        "HTTP_TIMEOUT_SEC",
        "PRICE_FILE_COMMAND_TIMEOUT_SEC",
    )
    @classmethod
    def _positive_seconds(cls, value: float) -> float:
        # a zero wait would spin the refresh loop
        if not value > 0:
            raise ValueError("must be a positive number of seconds")
        return value

    @field_validator("PRICE_FILE_COMMAND")
    @classmethod
    def _command_splits(cls, value: str) -> str:
        shlex.split(value)
        return value

    @field_validator("QUOTE_API_KEY", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _open_before_close(self) -> "Settings":
        if self.MARKET_OPEN_UTC >= self.MARKET_CLOSE_UTC:
            raise ValueError("MARKET_OPEN_UTC must be earlier than MARKET_CLOSE_UTC")
        return self

    @classmethod
    def from_env(cls) -> "Settings":
        raw_symbols = os.getenv("TICKER_SYMBOLS", ",".join(_DEFAULT_SYMBOLS))
        symbols = [s.strip() for s in raw_symbols.split(",") if s.strip()]
        if not symbols:
            symbols = list(_DEFAULT_SYMBOLS)

        return cls.model_validate(
            {
                "TICKER_SYMBOLS": symbols,
                "QUOTE_SOURCE": os.getenv("QUOTE_SOURCE", "api"),
                "QUOTE_API_KEY": os.getenv("QUOTE_API_KEY"),
                "QUOTE_API_BASE_URL": os.getenv("QUOTE_API_BASE_URL", "https://finnhub.io/api/v1"),
                "QUOTE_SCRAPE_URL": os.getenv(
                    "QUOTE_SCRAPE_URL", "https://www.google.com/finance/quote/{symbol}"
                ),
                "QUOTE_SCRAPE_PATTERN": os.getenv("QUOTE_SCRAPE_PATTERN", r'data-last-price="([0-9.,]+)"'),
                "PRICE_FILE_PATH": os.getenv("PRICE_FILE_PATH", "prices.txt"),
                "PRICE_FILE_COMMAND": os.getenv("PRICE_FILE_COMMAND", ""),
                "PRICE_FILE_COMMAND_TIMEOUT_SEC": os.getenv("PRICE_FILE_COMMAND_TIMEOUT_SEC", "120"),
                "HTTP_TIMEOUT_SEC": os.getenv("HTTP_TIMEOUT_SEC", "5"),
                "HID_VENDOR_ID": os.getenv("HID_VENDOR_ID", _DEFAULT_VENDOR_ID),
                "HID_PRODUCT_ID": os.getenv("HID_PRODUCT_ID", _DEFAULT_PRODUCT_ID),
                "HID_USAGE": os.getenv("HID_USAGE", _DEFAULT_USAGE),
                "HID_USAGE_PAGE": os.getenv("HID_USAGE_PAGE", _DEFAULT_USAGE_PAGE),
                "HID_REPORT_SIZE": os.getenv("HID_REPORT_SIZE", "32"),
                "MARKET_OPEN_UTC": os.getenv("MARKET_OPEN_UTC", "14:30"),
                "MARKET_CLOSE_UTC": os.getenv("MARKET_CLOSE_UTC", "21:00"),
                "REFRESH_OPEN_SEC": os.getenv("REFRESH_OPEN_SEC", "120"),
                "REFRESH_CLOSED_SEC": os.getenv("REFRESH_CLOSED_SEC", "10800"),
                "PRE_OPEN_WINDOW_SEC": os.getenv("PRE_OPEN_WINDOW_SEC", "10800"),
                "PRE_OPEN_BUFFER_SEC": os.getenv("PRE_OPEN_BUFFER_SEC", "120"),
            }
        )

    def market_schedule(self) -> MarketSchedule:
        return MarketSchedule(
            open_time=self.MARKET_OPEN_UTC,
            close_time=self.MARKET_CLOSE_UTC,
            open_interval_sec=self.REFRESH_OPEN_SEC,
            closed_interval_sec=self.REFRESH_CLOSED_SEC,
            pre_open_window_sec=self.PRE_OPEN_WINDOW_SEC,
            pre_open_buffer_sec=self.PRE_OPEN_BUFFER_SEC,
        )

    def device_target(self) -> DeviceTarget:
        return DeviceTarget(
            vendor_id=self.HID_VENDOR_ID,
            product_id=self.HID_PRODUCT_ID,
            usage=self.HID_USAGE,
            usage_page=self.HID_USAGE_PAGE,
            report_size=self.HID_REPORT_SIZE,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
