from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, Field

RefreshState = Literal["idle", "refreshing"]


class SignalFailure(BaseModel):
    signal: str
    provider: str
    kind: str
    attempts: int


class RefreshReport(BaseModel):
    started_at: datetime.datetime
    finished_at: datetime.datetime
    succeeded: list[str] = Field(default_factory=list)
    failed: list[SignalFailure] = Field(default_factory=list)
    accepted_fields: list[str] = Field(default_factory=list)
    articles_analyzed: int = 0

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()
