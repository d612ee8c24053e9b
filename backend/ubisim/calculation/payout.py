from __future__ import annotations

import datetime
import math
from typing import Mapping

from ubisim.config.settings import FormulaSettings
from ubisim.errors import InvalidInputError
from ubisim.schemas.economy import FIELD_BOUNDS, EconomicOverrides, EconomicSnapshot
from ubisim.schemas.payout import PayoutBreakdown, PayoutFactors


_REQUIRED_FIELDS = ("unemployment", "inflation", "cost_of_living", "average_income", "population")

ERROR_PROVIDER_PENALTY = 20
FALLBACK_FIELD_PENALTY = 10
STALE_PENALTY = 15
INITIALIZING_PENALTY = 25


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def _validated(field: str, value: object) -> float:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(field, value, "not a number")
    if not math.isfinite(value):
        raise InvalidInputError(field, value, "not finite")
    low, high = FIELD_BOUNDS[field]
    if value < low or value > high:
        raise InvalidInputError(field, value, f"expected {low:g}..{high:g}")
    return value


def _validated_population(value: object) -> int:
    number = _validated("population", value)
    if isinstance(number, float) and not number.is_integer():
        raise InvalidInputError("population", value, "not a whole number")
    return int(number)


def _validated_sentiment(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidInputError("sentiment", value, "not a finite number")
    if value < -1 or value > 1:
        raise InvalidInputError("sentiment", value, "expected -1..1")
    return float(value)


def confidence_score(economic: EconomicSnapshot, overridden: frozenset[str] = frozenset()) -> int:
    score = 100
    score -= ERROR_PROVIDER_PENALTY * sum(
        1 for status in economic.api_health.values() if status == "error"
    )
    score -= FALLBACK_FIELD_PENALTY * sum(
        1 for field in economic.fallback_fields if field not in overridden
    )
    if economic.data_freshness == "stale":
        score -= STALE_PENALTY
    elif economic.data_freshness == "initializing":
        score -= INITIALIZING_PENALTY
    return max(0, min(100, score))


def _describe_sentiment(sentiment: float) -> str:
    if sentiment > 0:
        return "positive"
    if sentiment < 0:
        return "negative"
    return "neutral"


def calculate_payout(
    economic: EconomicSnapshot,
    sentiment: float,
    overrides: EconomicOverrides | Mapping[str, object] | None = None,
    formula: FormulaSettings | None = None,
    now: datetime.datetime | None = None,
) -> PayoutBreakdown:
    """Derive the payout breakdown from an economic snapshot and news sentiment.

    Overrides are merged over ``economic`` without touching it. Any
    ``sentiment`` key in the overrides is ignored; sentiment always comes from
    the caller's live value.
    """
    formula = formula or FormulaSettings()
    if overrides is None:
        provided: dict[str, object] = {}
    elif isinstance(overrides, EconomicOverrides):
        provided = overrides.provided()
    else:
        provided = {
            key: value
            for key, value in overrides.items()
            if key in FIELD_BOUNDS and value is not None
        }
    inputs = {field: provided.get(field, getattr(economic, field)) for field in _REQUIRED_FIELDS}

    unemployment = _validated("unemployment", inputs["unemployment"])
    inflation = _validated("inflation", inputs["inflation"])
    cost_of_living = _validated("cost_of_living", inputs["cost_of_living"])
    average_income = _validated("average_income", inputs["average_income"])
    population = _validated_population(inputs["population"])
    sentiment = _validated_sentiment(sentiment)

    # 1-3. Factors; the floors keep a minimum viable payout.
    unemployment_factor = max(formula.unemployment_floor, unemployment / formula.unemployment_divisor)
    inflation_factor = max(formula.inflation_floor, inflation / formula.inflation_divisor)
    cost_of_living_factor = cost_of_living / formula.cost_of_living_baseline

    # 4. Base payout
    base_payout = round_half_up(
        average_income
        * formula.income_share
        * unemployment_factor
        * inflation_factor
        * cost_of_living_factor
    )

    # 5-6. Sentiment adjustment
    sentiment_multiplier = 1 + (sentiment * formula.sentiment_weight)
    adjusted_payout = round_half_up(base_payout * sentiment_multiplier)

    # 7. Integer product, exact for any population.
    total_cost = adjusted_payout * population

    explanation = [
        f"Unemployment factor: max({formula.unemployment_floor}, {unemployment}% / "
        f"{formula.unemployment_divisor}) = {unemployment_factor}",
        f"Inflation factor: max({formula.inflation_floor}, {inflation}% / "
        f"{formula.inflation_divisor}) = {inflation_factor}",
        f"Cost-of-living factor: {cost_of_living} / {formula.cost_of_living_baseline} "
        f"= {cost_of_living_factor}",
        f"Base payout: round({average_income} x {formula.income_share} x {unemployment_factor} "
        f"x {inflation_factor} x {cost_of_living_factor}) = {base_payout:,}",
        f"Sentiment adjustment: {_describe_sentiment(sentiment)} news sentiment ({sentiment}) "
        f"gives multiplier {sentiment_multiplier}, round({base_payout:,} x {sentiment_multiplier}) "
        f"= {adjusted_payout:,}",
        f"Total program cost: {adjusted_payout:,} x {population:,} residents = {total_cost:,}",
    ]

    factors = PayoutFactors(
        unemployment=unemployment,
        inflation=inflation,
        cost_of_living=cost_of_living,
        sentiment=sentiment,
        average_income=average_income,
        population=population,
        unemployment_factor=unemployment_factor,
        inflation_factor=inflation_factor,
        cost_of_living_factor=cost_of_living_factor,
        sentiment_multiplier=sentiment_multiplier,
    )

    return PayoutBreakdown(
        base_payout=base_payout,
        adjusted_payout=adjusted_payout,
        total_cost=total_cost,
        factors=factors,
        explanation=explanation,
        confidence=confidence_score(economic, frozenset(provided)),
        simulated=bool(provided),
        calculated_at=now or datetime.datetime.now(datetime.timezone.utc),
    )
