from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable

from ubisim.config.settings import FormulaSettings
from ubisim.errors import ExhaustedError, ProviderError, RefreshError
from ubisim.providers.base import ProviderClient
from ubisim.providers.health import ProviderHealthRegistry
from ubisim.providers.retry import RetryingFetcher
from ubisim.schemas.refresh import RefreshReport, RefreshState, SignalFailure
from ubisim.sentiment.aggregator import SentimentAggregator
from ubisim.store import EconomicSnapshotStore, utcnow

logger = logging.getLogger(__name__)

Derive = Callable[[float], dict[str, float]]
Bounds = tuple[float, float]

# CPI is an index level (1982-84 = 100); anything below 1 is not a reading.
CPI_BOUNDS: Bounds = (1.0, math.inf)


@dataclass(frozen=True)
class EconomicSignal:
    name: str
    signal_id: str
    fetcher: RetryingFetcher
    derive: Derive
    # Inclusive range a raw provider value must fall in.
    bounds: Bounds = (-math.inf, math.inf)


def single_field(field: str) -> Derive:
    return lambda value: {field: value}


def cpi_fields(formula: FormulaSettings) -> Derive:
    """Inflation and cost of living both come from the CPI level."""

    def derive(cpi: float) -> dict[str, float]:
        inflation = max(formula.cpi_inflation_floor, cpi * formula.cpi_inflation_coefficient)
        cost_of_living = max(
            formula.cost_of_living_min,
            min(formula.cost_of_living_max, cpi * formula.cpi_cost_of_living_coefficient),
        )
        return {"inflation": inflation, "cost_of_living": cost_of_living}

    return derive


class RefreshOrchestrator:
    """Runs one refresh cycle: all signals concurrently, then the store."""

    def __init__(
        self,
        store: EconomicSnapshotStore,
        signals: list[EconomicSignal],
        news_client: ProviderClient,
        news_query: str,
        aggregator: SentimentAggregator,
        health: ProviderHealthRegistry,
    ) -> None:
        self._store = store
        self._signals = signals
        self._news_client = news_client
        self._news_query = news_query
        self._aggregator = aggregator
        self._health = health
        self._in_flight = 0
        self.last_report: RefreshReport | None = None

    @property
    def state(self) -> RefreshState:
        return "refreshing" if self._in_flight else "idle"

    def _rejected(self, signal: EconomicSignal, raw: Any, reason: str) -> ExhaustedError:
        error = ProviderError(
            f"{reason} {raw!r}",
            provider=signal.fetcher.provider,
            kind="empty_response",
            signal_id=signal.signal_id,
        )
        return ExhaustedError(signal.fetcher.provider, signal.signal_id, 1, error)

    async def _fetch_signal(self, signal: EconomicSignal) -> dict[str, float]:
        raw = await signal.fetcher.fetch_with_retry(signal.signal_id)
        try:
            value = float(raw)
        except (TypeError, ValueError) as exc:
            raise self._rejected(signal, raw, "unparseable value") from exc
        low, high = signal.bounds
        if not math.isfinite(value) or value < low or value > high:
            raise self._rejected(signal, raw, "out-of-range value")
        return signal.derive(value)

    async def _fetch_news(self) -> Any:
        provider = self._news_client.name
        try:
            articles = await self._news_client.fetch(self._news_query)
        except ProviderError as exc:
            self._health.mark(provider, "error")
            raise ExhaustedError(provider, self._news_query, 1, exc) from exc
        self._health.mark(provider, "healthy")
        return self._aggregator.analyze(articles)

    async def refresh(self) -> RefreshReport:
        started_at = utcnow()
        self._in_flight += 1
        logger.info("Refresh cycle started (%d economic signals + news)", len(self._signals))
        try:
            results = await asyncio.gather(
                *(self._fetch_signal(signal) for signal in self._signals),
                self._fetch_news(),
                return_exceptions=True,
            )
        finally:
            self._in_flight -= 1

        names = [signal.name for signal in self._signals] + ["news"]
        providers = [signal.fetcher.provider for signal in self._signals] + [self._news_client.name]
        partial: dict[str, float] = {}
        succeeded: list[str] = []
        failed: list[SignalFailure] = []
        unexpected: list[BaseException] = []
        degraded: set[str] = set()
        news_result = None

        for name, provider, result in zip(names, providers, results):
            if isinstance(result, ExhaustedError):
                failed.append(
                    SignalFailure(
                        signal=name,
                        provider=result.provider,
                        kind=result.last_error.kind,
                        attempts=result.attempts,
                    )
                )
                degraded.add(provider)
            elif isinstance(result, Exception):
                logger.error("Signal %s raised %r", name, result)
                unexpected.append(result)
                degraded.add(provider)
            elif isinstance(result, BaseException):
                raise result
            elif name == "news":
                news_result = result
                succeeded.append(name)
            else:
                partial.update(result)
                succeeded.append(name)

        # A provider that failed any signal this cycle reports error, whatever
        # its other signals did.
        for provider in sorted(degraded):
            self._health.mark(provider, "error")

        accepted = self._store.apply_economic_update(partial)
        articles = 0
        if news_result is not None and self._store.apply_news_update(news_result):
            articles = news_result.count

        report = RefreshReport(
            started_at=started_at,
            finished_at=utcnow(),
            succeeded=succeeded,
            failed=failed,
            accepted_fields=accepted,
            articles_analyzed=articles,
        )
        self.last_report = report
        logger.info(
            "Refresh cycle finished in %.2fs: %d succeeded, %d failed",
            report.duration_seconds,
            len(succeeded),
            len(failed),
        )

        if unexpected:
            raise RefreshError(
                f"Refresh cycle hit {len(unexpected)} unexpected error(s)",
                details={"errors": [repr(exc) for exc in unexpected]},
            ) from unexpected[0]
        return report
