import datetime
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ubisim.engine import EconomicEngine
from ubisim.errors import InvalidInputError, RefreshError
from ubisim.schemas.economy import EconomicOverrides, EconomicSnapshot
from ubisim.schemas.news import NewsSnapshot
from ubisim.schemas.payout import PayoutBreakdown, Scenario, SimulationRequest

API_VERSION = "1.0.0"

router = APIRouter()


def get_engine(request: Request) -> EconomicEngine:
    return request.app.state.engine


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@router.get("/health")
def health(request: Request, engine: EconomicEngine = Depends(get_engine)) -> dict:
    started_at = getattr(request.app.state, "started_at", time.monotonic())
    return {
        "status": "healthy",
        "timestamp": _utcnow().isoformat(),
        "uptime_seconds": round(time.monotonic() - started_at, 3),
        "version": API_VERSION,
        "refresh_state": engine.orchestrator.state,
        "api_health": engine.health.snapshot(),
    }


@router.get("/economic-data", response_model=EconomicSnapshot)
def economic_data(engine: EconomicEngine = Depends(get_engine)) -> EconomicSnapshot:
    return engine.get_economic_snapshot()


@router.get("/news-sentiment", response_model=NewsSnapshot)
def news_sentiment(engine: EconomicEngine = Depends(get_engine)) -> NewsSnapshot:
    return engine.get_news_snapshot()


@router.get("/ubi-calculation", response_model=PayoutBreakdown)
def ubi_calculation(engine: EconomicEngine = Depends(get_engine)) -> PayoutBreakdown:
    try:
        return engine.compute_payout()
    except InvalidInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_dict()) from exc


@router.post("/simulate", response_model=PayoutBreakdown)
def simulate(
    payload: SimulationRequest, engine: EconomicEngine = Depends(get_engine)
) -> PayoutBreakdown:
    overrides = EconomicOverrides(**payload.model_dump(exclude_none=True))
    try:
        return engine.compute_payout(overrides)
    except InvalidInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Validation failed.", "error": exc.to_dict()},
        ) from exc


@router.get("/scenarios", response_model=list[Scenario])
def scenarios(engine: EconomicEngine = Depends(get_engine)) -> list[Scenario]:
    return engine.list_scenarios()


@router.post("/refresh-data")
async def refresh_data(engine: EconomicEngine = Depends(get_engine)) -> dict:
    try:
        report = await engine.trigger_refresh()
    except RefreshError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "success": False,
                "message": "Failed to refresh data",
                "error": exc.message,
            },
        ) from exc
    return {
        "success": True,
        "message": "Data refreshed successfully",
        "timestamp": _utcnow().isoformat(),
        "report": report.model_dump(mode="json"),
    }
