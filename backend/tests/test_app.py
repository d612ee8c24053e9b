from ubisim.config.settings import Settings
from ubisim.main import create_app


def test_app_mounts_engine_routes() -> None:
    app = create_app(Settings(scheduler_enabled=False))
    paths = {route.path for route in app.routes}

    assert {
        "/api/health",
        "/api/economic-data",
        "/api/news-sentiment",
        "/api/ubi-calculation",
        "/api/simulate",
        "/api/scenarios",
        "/api/refresh-data",
    } <= paths
    assert app.state.engine.orchestrator.state == "idle"
