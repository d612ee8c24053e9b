import asyncio

import pytest

from ubisim.errors import ExhaustedError, ProviderError
from ubisim.providers.base import ProviderClient
from ubisim.providers.health import ProviderHealthRegistry
from ubisim.providers.retry import RetryingFetcher


class ScriptedClient(ProviderClient):
    """Plays back a list of outcomes; an exception instance is raised."""

    name = "fred"

    def __init__(self, outcomes: list) -> None:
        super().__init__(timeout=1.0)
        self.outcomes = list(outcomes)
        self.calls: list[str] = []

    def fetch_sync(self, signal_id: str):
        self.calls.append(signal_id)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def provider_error(kind: str, status_code: int | None = None) -> ProviderError:
    return ProviderError(f"fake {kind}", provider="fred", kind=kind, status_code=status_code)


def build_fetcher(client: ScriptedClient, max_retries: int = 3, base_delay: float = 1.0):
    health = ProviderHealthRegistry(["fred"])
    sleep = RecordingSleep()
    fetcher = RetryingFetcher(client, health, max_retries=max_retries, base_delay=base_delay, sleep=sleep)
    return fetcher, health, sleep


def test_always_timing_out_provider_exhausts_after_four_calls() -> None:
    client = ScriptedClient([provider_error("timeout")])
    fetcher, health, sleep = build_fetcher(client)

    with pytest.raises(ExhaustedError) as excinfo:
        asyncio.run(fetcher.fetch_with_retry("UNRATE"))

    assert client.calls == ["UNRATE"] * 4
    assert sleep.delays == [1, 2, 4]
    assert health.get("fred") == "error"
    assert excinfo.value.attempts == 4
    assert excinfo.value.last_error.kind == "timeout"


def test_recovers_after_transient_network_error() -> None:
    client = ScriptedClient([provider_error("network_error"), "4.3"])
    fetcher, health, sleep = build_fetcher(client)

    value = asyncio.run(fetcher.fetch_with_retry("UNRATE"))

    assert value == "4.3"
    assert len(client.calls) == 2
    assert sleep.delays == [1]
    assert health.get("fred") == "healthy"


@pytest.mark.parametrize("kind", ["http_error", "empty_response"])
def test_permanent_failures_are_not_retried(kind: str) -> None:
    client = ScriptedClient([provider_error(kind, status_code=401 if kind == "http_error" else None)])
    fetcher, health, sleep = build_fetcher(client)

    with pytest.raises(ExhaustedError) as excinfo:
        asyncio.run(fetcher.fetch_with_retry("UNRATE"))

    assert len(client.calls) == 1
    assert sleep.delays == []
    assert health.get("fred") == "error"
    assert excinfo.value.attempts == 1
    assert excinfo.value.last_error.kind == kind


def test_max_retries_override_and_base_delay() -> None:
    client = ScriptedClient([provider_error("timeout")])
    fetcher, _, sleep = build_fetcher(client, base_delay=0.5)

    with pytest.raises(ExhaustedError):
        asyncio.run(fetcher.fetch_with_retry("UNRATE", max_retries=2))

    assert len(client.calls) == 3
    assert sleep.delays == [0.5, 1.0]


def test_health_flips_back_to_healthy() -> None:
    client = ScriptedClient([provider_error("http_error", 500)])
    fetcher, health, _ = build_fetcher(client)
    with pytest.raises(ExhaustedError):
        asyncio.run(fetcher.fetch_with_retry("UNRATE"))
    assert health.get("fred") == "error"

    client.outcomes = ["4.1"]
    assert asyncio.run(fetcher.fetch_with_retry("UNRATE")) == "4.1"
    assert health.get("fred") == "healthy"


def test_backoff_does_not_block_other_fetches() -> None:
    slow = ScriptedClient([provider_error("timeout"), "1.0"])
    fast = ScriptedClient(["2.0"])
    fast.name = "alpha_vantage"
    health = ProviderHealthRegistry()
    order: list[str] = []

    async def slow_sleep(delay: float) -> None:
        await asyncio.sleep(0.2)
        order.append("slow-wake")

    slow_fetcher = RetryingFetcher(slow, health, sleep=slow_sleep)
    fast_fetcher = RetryingFetcher(fast, health)

    async def run_both():
        async def fast_task():
            value = await fast_fetcher.fetch_with_retry("SPY")
            order.append("fast-done")
            return value

        return await asyncio.gather(slow_fetcher.fetch_with_retry("UNRATE"), fast_task())

    assert asyncio.run(run_both()) == ["1.0", "2.0"]
    assert order == ["fast-done", "slow-wake"]
    assert health.snapshot() == {"fred": "healthy", "alpha_vantage": "healthy"}
