from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ubisim.errors import ExhaustedError, ProviderError
from ubisim.providers.base import ProviderClient
from ubisim.providers.health import ProviderHealthRegistry

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, ProviderError) and exc.transient


class RetryingFetcher:
    """Wraps one provider client with bounded retry and health tracking.

    ``max_retries`` counts retries after the initial attempt, so the default
    of 3 allows at most 4 calls. Backoff doubles from ``base_delay``.
    """

    def __init__(
        self,
        client: ProviderClient,
        health: ProviderHealthRegistry,
        max_retries: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._health = health
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._sleep = sleep

    @property
    def provider(self) -> str:
        return self._client.name

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "%s attempt %d failed (%s), retrying in %.1fs",
            self.provider,
            retry_state.attempt_number,
            getattr(exc, "kind", exc),
            delay,
        )

    async def fetch_with_retry(self, signal_id: str, max_retries: int | None = None) -> Any:
        retries = self._max_retries if max_retries is None else max_retries
        retrying = AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(retries + 1),
            wait=wait_exponential(multiplier=self._base_delay, exp_base=2),
            retry=retry_if_exception(_is_transient),
            before_sleep=self._log_retry,
            reraise=True,
        )
        attempts = 0
        try:
            async for attempt in retrying:
                with attempt:
                    attempts += 1
                    value = await self._client.fetch(signal_id)
        except ProviderError as exc:
            self._health.mark(self.provider, "error")
            logger.warning(
                "%s:%s gave up after %d attempt(s): %s",
                self.provider,
                signal_id,
                attempts,
                exc.message,
            )
            raise ExhaustedError(self.provider, signal_id, attempts, exc) from exc

        self._health.mark(self.provider, "healthy")
        return value
