from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ubisim.api.routes import API_VERSION, router
from ubisim.config.settings import Settings, settings
from ubisim.engine import EconomicEngine
from ubisim.jobs.scheduler import RefreshScheduler

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def create_app(app_settings: Settings = settings, engine: EconomicEngine | None = None) -> FastAPI:
    configure_logging(app_settings.log_level)
    engine = engine or EconomicEngine(app_settings)
    scheduler = RefreshScheduler(engine.trigger_refresh, app_settings.refresh_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app_settings.scheduler_enabled:
            scheduler.start()
        yield
        await scheduler.stop()

    app = FastAPI(title="UBI Simulator API", version=API_VERSION, lifespan=lifespan)
    app.state.engine = engine
    app.state.scheduler = scheduler
    app.state.started_at = time.monotonic()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router, prefix="/api")
    logger.info("UBI simulator API ready")
    return app


app = create_app()
