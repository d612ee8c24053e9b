from __future__ import annotations

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

HealthStatus = Literal["healthy", "error", "unknown"]
Freshness = Literal["fresh", "stale", "initializing"]

# Inclusive domain bounds for every economic field.
FIELD_BOUNDS: dict[str, tuple[float, float]] = {
    "unemployment": (0.0, 100.0),
    "inflation": (-10.0, 50.0),
    "cost_of_living": (0.0, 1000.0),
    "population": (1.0, 10_000_000_000.0),
    "average_income": (0.0, 1_000_000.0),
    "gdp": (0.0, float("inf")),
    "market_index": (0.0, float("inf")),
}

ESSENTIAL_FIELDS: tuple[str, ...] = (
    "unemployment",
    "inflation",
    "average_income",
    "cost_of_living",
)


class EconomicSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    unemployment: float
    inflation: float
    cost_of_living: float
    population: int
    average_income: float
    gdp: Optional[float] = None
    market_index: Optional[float] = None
    last_updated: Optional[datetime.datetime] = None
    api_health: dict[str, HealthStatus] = Field(default_factory=dict)
    data_freshness: Freshness = "initializing"
    fallback_fields: list[str] = Field(default_factory=list)


class EconomicOverrides(BaseModel):
    """Partial economic values merged over the live snapshot for simulation."""

    model_config = ConfigDict(extra="ignore")

    unemployment: Optional[float] = None
    inflation: Optional[float] = None
    cost_of_living: Optional[float] = None
    population: Optional[int] = None
    average_income: Optional[float] = None
    gdp: Optional[float] = None
    market_index: Optional[float] = None

    def provided(self) -> dict[str, float | int]:
        return self.model_dump(exclude_none=True)
