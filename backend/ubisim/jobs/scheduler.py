from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable

from ubisim.errors import RefreshError

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Calls the refresh entry point at startup and then every ``interval_seconds``."""

    def __init__(
        self,
        trigger: Callable[[], Awaitable[object]],
        interval_seconds: float,
    ) -> None:
        self._trigger = trigger
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Refresh scheduler started (every %ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Refresh scheduler stopped")

    async def _run_loop(self) -> None:
        while True:
            try:
                await self._trigger()
            except RefreshError as exc:
                logger.error("Scheduled refresh failed: %s", exc.message)
            except Exception:
                logger.exception("Scheduled refresh raised; retrying next interval")
            await asyncio.sleep(self._interval)
