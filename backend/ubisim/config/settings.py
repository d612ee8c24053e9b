from __future__ import annotations

from typing import Dict, List

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseModel):
    max_retries: int = 3
    base_delay_seconds: float = 1.0


class FallbackSettings(BaseModel):
    unemployment: float = 4.0
    inflation: float = 3.0
    average_income: float = 70000.0
    cost_of_living: float = 100.0
    population: int = 333_000_000


class FormulaSettings(BaseModel):
    # Formula constants, not semantics.
    income_share: float = 0.1
    unemployment_floor: float = 0.5
    unemployment_divisor: float = 10.0
    inflation_floor: float = 0.8
    inflation_divisor: float = 5.0
    cost_of_living_baseline: float = 100.0
    sentiment_weight: float = 0.1
    cpi_inflation_coefficient: float = 0.01
    cpi_inflation_floor: float = 0.0
    cpi_cost_of_living_coefficient: float = 0.04
    cost_of_living_min: float = 80.0
    cost_of_living_max: float = 150.0


class SentimentSettings(BaseModel):
    damping: float = 0.1
    retained_articles: int = 5
    extra_words: Dict[str, int] = Field(default_factory=dict)
    negators: List[str] = Field(
        default_factory=lambda: ["not", "no", "never", "without", "don't", "isn't", "won't", "can't"]
    )


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="UBISIM_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    fred_api_key: str | None = None
    alpha_vantage_api_key: str | None = None
    news_api_key: str | None = None

    fred_base_url: str = "https://api.stlouisfed.org"
    alpha_vantage_base_url: str = "https://www.alphavantage.co"
    news_api_base_url: str = "https://newsapi.org"
    timeout_seconds: float = 10.0

    unemployment_series: str = "UNRATE"
    cpi_series: str = "CPIAUCSL"
    income_series: str = "MEHOINUSA646N"
    gdp_series: str = "GDP"
    market_symbol: str = "SPY"
    news_query: str = 'unemployment OR inflation OR economy OR "federal reserve"'
    news_language: str = "en"
    news_page_size: int = 20


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="UBISIM_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "UBISIM_LOG_LEVEL"),
    )
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    freshness_window_seconds: int = 300
    refresh_interval_seconds: int = 300
    scheduler_enabled: bool = True

    retry: RetrySettings = Field(default_factory=RetrySettings)
    fallbacks: FallbackSettings = Field(default_factory=FallbackSettings)
    formula: FormulaSettings = Field(default_factory=FormulaSettings)
    sentiment: SentimentSettings = Field(default_factory=SentimentSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)


settings = Settings()
