from typing import Literal

from pydantic import BaseModel

from hidticker.schemas.device import SendStatus
from hidticker.schemas.refresh import RefreshDecision

CycleStage = Literal["fetch", "encode", "send", "done"]


class CycleResult(BaseModel):
    ok: bool
    stage: CycleStage
    reason: str | None = None
    send_status: SendStatus | None = None
    decision: RefreshDecision | None = None
