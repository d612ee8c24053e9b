import asyncio
import time
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from ubisim.api.routes import (
    economic_data,
    health,
    news_sentiment,
    refresh_data,
    scenarios,
    simulate,
    ubi_calculation,
)
from ubisim.config.settings import Settings
from ubisim.engine import EconomicEngine
from ubisim.errors import InvalidInputError, RefreshError
from ubisim.providers.base import ProviderClient
from ubisim.schemas.payout import SimulationRequest


class StaticClient(ProviderClient):
    def __init__(self, name: str, value) -> None:
        super().__init__()
        self.name = name
        self.value = value

    def fetch_sync(self, signal_id: str):
        return self.value


def build_engine() -> EconomicEngine:
    return EconomicEngine(
        Settings(),
        fred=StaticClient("fred", "6.0"),
        market=StaticClient("alpha_vantage", "500"),
        news=StaticClient("news_api", []),
    )


def test_read_routes_return_snapshots() -> None:
    engine = build_engine()

    assert economic_data(engine=engine) == engine.get_economic_snapshot()
    assert news_sentiment(engine=engine) == engine.get_news_snapshot()
    assert ubi_calculation(engine=engine).base_payout == engine.compute_payout().base_payout
    assert [scenario.id for scenario in scenarios(engine=engine)] == ["crisis", "boom", "disaster"]


def test_simulate_route_uses_request_values() -> None:
    engine = build_engine()
    payload = SimulationRequest(unemployment=12.5, inflation=6.2, cost_of_living=115, population=50_000_000)

    result = simulate(payload, engine=engine)

    assert result.simulated is True
    assert result.factors.population == 50_000_000
    assert result.total_cost == result.adjusted_payout * 50_000_000
    assert engine.get_economic_snapshot().unemployment == 4.0


def test_simulation_request_bounds() -> None:
    with pytest.raises(ValidationError):
        SimulationRequest(unemployment=150, inflation=2, cost_of_living=100)
    with pytest.raises(ValidationError):
        SimulationRequest(unemployment=5, inflation=-20, cost_of_living=100)


def test_simulate_maps_invalid_input_to_400() -> None:
    engine = build_engine()
    payload = SimulationRequest(unemployment=5, inflation=2, cost_of_living=100)

    with patch.object(engine, "compute_payout", side_effect=InvalidInputError("population", 0)):
        with pytest.raises(HTTPException) as excinfo:
            simulate(payload, engine=engine)

    assert excinfo.value.status_code == 400


def test_refresh_route_reports_success() -> None:
    engine = build_engine()

    body = asyncio.run(refresh_data(engine=engine))

    assert body["success"] is True
    assert "unemployment" in body["report"]["accepted_fields"]
    assert engine.get_economic_snapshot().unemployment == 6.0


def test_refresh_route_maps_refresh_error_to_500() -> None:
    engine = build_engine()
    engine.trigger_refresh = AsyncMock(side_effect=RefreshError("cycle could not run"))

    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(refresh_data(engine=engine))

    assert excinfo.value.status_code == 500
    assert excinfo.value.detail["success"] is False


def test_health_route() -> None:
    engine = build_engine()
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(started_at=time.monotonic())))

    body = health(request, engine=engine)

    assert body["status"] == "healthy"
    assert body["refresh_state"] == "idle"
    assert body["api_health"]["fred"] == "unknown"
