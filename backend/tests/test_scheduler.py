import asyncio

from ubisim.errors import RefreshError
from ubisim.jobs.scheduler import RefreshScheduler


def test_scheduler_triggers_refresh_until_stopped() -> None:
    calls: list[int] = []

    async def trigger() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RefreshError("first cycle failed")

    async def run() -> bool:
        scheduler = RefreshScheduler(trigger, interval_seconds=0.01)
        scheduler.start()
        scheduler.start()
        await asyncio.sleep(0.1)
        running = scheduler.running
        await scheduler.stop()
        return running and not scheduler.running

    assert asyncio.run(run()) is True
    assert len(calls) >= 2


def test_scheduler_survives_unexpected_trigger_errors() -> None:
    calls: list[int] = []

    async def trigger() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("validation blew up")

    async def run() -> bool:
        scheduler = RefreshScheduler(trigger, interval_seconds=0.01)
        scheduler.start()
        await asyncio.sleep(0.1)
        running = scheduler.running
        await scheduler.stop()
        return running

    assert asyncio.run(run()) is True
    assert len(calls) >= 2
