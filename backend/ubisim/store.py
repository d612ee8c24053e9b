from __future__ import annotations

import datetime
import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, Mapping

from ubisim.config.settings import FallbackSettings
from ubisim.providers.health import ProviderHealthRegistry
from ubisim.schemas.economy import (
    ESSENTIAL_FIELDS,
    FIELD_BOUNDS,
    EconomicSnapshot,
    Freshness,
)
from ubisim.schemas.news import NewsSnapshot, SentimentResult

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def coerce_field(field: str, value: object) -> float | int | None:
    """Return ``value`` as a number valid for ``field``, or None if it is not."""
    bounds = FIELD_BOUNDS.get(field)
    if bounds is None or value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    low, high = bounds
    if number < low or number > high:
        return None
    if field == "population":
        if not number.is_integer():
            return None
        return int(number)
    return number


@dataclass(frozen=True)
class StoreSnapshot:
    economic: EconomicSnapshot
    news: NewsSnapshot


class EconomicSnapshotStore:
    """Single owner of the current economic and news state.

    Writers build a new state and swap it in under the lock; readers copy
    references under the same lock, so a reader never sees half an update.
    """

    def __init__(
        self,
        fallbacks: FallbackSettings | None = None,
        health: ProviderHealthRegistry | None = None,
        freshness_window_seconds: int = 300,
        clock: Clock = utcnow,
    ) -> None:
        self._fallbacks = fallbacks or FallbackSettings()
        self._health = health or ProviderHealthRegistry()
        self._freshness_window = datetime.timedelta(seconds=freshness_window_seconds)
        self._clock = clock
        self._lock = threading.Lock()

        values: dict[str, float | int | None] = {field: None for field in FIELD_BOUNDS}
        values["population"] = self._fallbacks.population
        self._values = self._with_fallbacks(values)
        self._sourced: frozenset[str] = frozenset()
        self._economic_updated_at: datetime.datetime | None = None
        self._news = NewsSnapshot()

    def _with_fallbacks(
        self, values: dict[str, float | int | None]
    ) -> dict[str, float | int | None]:
        for field in ESSENTIAL_FIELDS:
            if values.get(field) is None:
                values[field] = getattr(self._fallbacks, field)
        return values

    def apply_economic_update(self, partial: Mapping[str, object]) -> list[str]:
        accepted: dict[str, float | int] = {}
        for field, value in partial.items():
            number = coerce_field(field, value)
            if number is None:
                if value is not None:
                    logger.warning("Rejected %s=%r (not a finite in-range number)", field, value)
                continue
            accepted[field] = number

        if not accepted:
            return []

        with self._lock:
            values = dict(self._values)
            values.update(accepted)
            self._values = self._with_fallbacks(values)
            self._sourced = self._sourced | frozenset(accepted)
            self._economic_updated_at = self._clock()

        logger.info("Economic snapshot updated: %s", ", ".join(sorted(accepted)))
        return sorted(accepted)

    def apply_news_update(self, result: SentimentResult) -> bool:
        if result.count <= 0:
            return False
        news = NewsSnapshot(
            sentiment=result.aggregate,
            articles=list(result.retained),
            news_count=result.count,
            last_updated=self._clock(),
        )
        with self._lock:
            self._news = news
        logger.info("News sentiment updated: %.3f over %d articles", result.aggregate, result.count)
        return True

    def _freshness(self, updated_at: datetime.datetime | None, now: datetime.datetime) -> Freshness:
        if updated_at is None:
            return "initializing"
        if now - updated_at <= self._freshness_window:
            return "fresh"
        return "stale"

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            values = self._values
            sourced = self._sourced
            updated_at = self._economic_updated_at
            news = self._news

        economic = EconomicSnapshot(
            unemployment=values["unemployment"],
            inflation=values["inflation"],
            cost_of_living=values["cost_of_living"],
            population=values["population"],
            average_income=values["average_income"],
            gdp=values["gdp"],
            market_index=values["market_index"],
            last_updated=updated_at,
            api_health=self._health.snapshot(),
            data_freshness=self._freshness(updated_at, self._clock()),
            fallback_fields=[field for field in ESSENTIAL_FIELDS if field not in sourced],
        )
        return StoreSnapshot(economic=economic, news=news)
