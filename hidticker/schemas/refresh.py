from datetime import datetime, time
from typing import Literal

from pydantic import BaseModel, ConfigDict

RefreshState = Literal["MARKET_OPEN", "MARKET_CLOSED", "PRE_OPEN"]


class MarketSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    open_time: time = time(14, 30)
    close_time: time = time(21, 0)
    open_interval_sec: float = 120.0
    closed_interval_sec: float = 3 * 3600.0
    pre_open_window_sec: float = 3 * 3600.0
    pre_open_buffer_sec: float = 120.0


class RefreshDecision(BaseModel):
    state: RefreshState
    wait_sec: float
    next_open: datetime | None = None
