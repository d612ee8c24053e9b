from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PayoutFactors(BaseModel):
    model_config = ConfigDict(frozen=True)

    unemployment: float
    inflation: float
    cost_of_living: float
    sentiment: float
    average_income: float
    population: int
    unemployment_factor: float
    inflation_factor: float
    cost_of_living_factor: float
    sentiment_multiplier: float


class PayoutBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_payout: int
    adjusted_payout: int
    total_cost: int
    factors: PayoutFactors
    explanation: list[str] = Field(default_factory=list)
    confidence: int = Field(ge=0, le=100)
    simulated: bool = False
    calculated_at: datetime.datetime


class SimulationRequest(BaseModel):
    unemployment: float = Field(ge=0, le=100)
    inflation: float = Field(ge=-10, le=50)
    cost_of_living: float = Field(ge=0, le=1000)
    population: Optional[int] = Field(default=None, ge=1, le=10_000_000_000)
    average_income: Optional[float] = Field(default=None, ge=0, le=1_000_000)


class Scenario(BaseModel):
    id: str
    name: str
    description: str
    data: SimulationRequest
    sentiment: float = Field(ge=-1.0, le=1.0)
