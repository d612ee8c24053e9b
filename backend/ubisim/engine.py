"""Collaborator-facing entry points of the aggregation and calculation engine."""

from __future__ import annotations

from typing import Mapping

from ubisim.calculation.payout import calculate_payout
from ubisim.config.settings import Settings
from ubisim.jobs.refresh import (
    CPI_BOUNDS,
    EconomicSignal,
    RefreshOrchestrator,
    cpi_fields,
    single_field,
)
from ubisim.providers.alpha_vantage import AlphaVantageClient
from ubisim.providers.base import ProviderClient
from ubisim.providers.fred import FredClient
from ubisim.providers.health import ProviderHealthRegistry
from ubisim.providers.newsapi import NewsApiClient
from ubisim.providers.retry import RetryingFetcher
from ubisim.scenarios import SCENARIOS
from ubisim.schemas.economy import FIELD_BOUNDS, EconomicOverrides, EconomicSnapshot
from ubisim.schemas.news import NewsSnapshot
from ubisim.schemas.payout import PayoutBreakdown, Scenario
from ubisim.schemas.refresh import RefreshReport
from ubisim.sentiment.aggregator import SentimentAggregator
from ubisim.store import Clock, EconomicSnapshotStore, utcnow


class EconomicEngine:
    def __init__(
        self,
        settings: Settings,
        fred: ProviderClient | None = None,
        market: ProviderClient | None = None,
        news: ProviderClient | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.settings = settings
        providers = settings.providers
        fred = fred or FredClient(providers)
        market = market or AlphaVantageClient(providers)
        news = news or NewsApiClient(providers)

        self.health = ProviderHealthRegistry([fred.name, market.name, news.name])
        self.store = EconomicSnapshotStore(
            fallbacks=settings.fallbacks,
            health=self.health,
            freshness_window_seconds=settings.freshness_window_seconds,
            clock=clock,
        )

        def fetcher(client: ProviderClient) -> RetryingFetcher:
            return RetryingFetcher(
                client,
                self.health,
                max_retries=settings.retry.max_retries,
                base_delay=settings.retry.base_delay_seconds,
            )

        fred_fetcher = fetcher(fred)

        def field_signal(name: str, signal_id: str, source: RetryingFetcher) -> EconomicSignal:
            return EconomicSignal(name, signal_id, source, single_field(name), bounds=FIELD_BOUNDS[name])

        signals = [
            field_signal("unemployment", providers.unemployment_series, fred_fetcher),
            EconomicSignal(
                "cpi", providers.cpi_series, fred_fetcher, cpi_fields(settings.formula), bounds=CPI_BOUNDS
            ),
            field_signal("average_income", providers.income_series, fred_fetcher),
            field_signal("gdp", providers.gdp_series, fred_fetcher),
            field_signal("market_index", providers.market_symbol, fetcher(market)),
        ]
        self.orchestrator = RefreshOrchestrator(
            store=self.store,
            signals=signals,
            news_client=news,
            news_query=providers.news_query,
            aggregator=SentimentAggregator(settings.sentiment),
            health=self.health,
        )

    def get_economic_snapshot(self) -> EconomicSnapshot:
        return self.store.snapshot().economic

    def get_news_snapshot(self) -> NewsSnapshot:
        return self.store.snapshot().news

    def compute_payout(
        self, overrides: EconomicOverrides | Mapping[str, object] | None = None
    ) -> PayoutBreakdown:
        current = self.store.snapshot()
        return calculate_payout(
            current.economic,
            current.news.sentiment,
            overrides=overrides,
            formula=self.settings.formula,
        )

    async def trigger_refresh(self) -> RefreshReport:
        return await self.orchestrator.refresh()

    def list_scenarios(self) -> list[Scenario]:
        return list(SCENARIOS)
