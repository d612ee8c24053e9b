from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from ubisim.errors import ProviderError


class ProviderClient(ABC):
    """One upstream provider. Performs exactly one call per fetch, no retries."""

    name: str = "provider"

    def __init__(self, timeout: float = 10.0) -> None:
        self._timeout = timeout

    async def fetch(self, signal_id: str) -> Any:
        # urllib blocks, so each call gets its own worker thread.
        return await asyncio.to_thread(self.fetch_sync, signal_id)

    @abstractmethod
    def fetch_sync(self, signal_id: str) -> Any:
        """Perform the HTTP call and return the unparsed value."""

    def _empty(self, signal_id: str, message: str) -> ProviderError:
        return ProviderError(message, provider=self.name, kind="empty_response", signal_id=signal_id)

    def _missing_key(self, signal_id: str) -> ProviderError:
        return ProviderError(
            f"{self.name} API key is not configured",
            provider=self.name,
            kind="http_error",
            signal_id=signal_id,
        )
