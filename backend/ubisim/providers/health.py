from __future__ import annotations

import threading
from typing import Iterable

from ubisim.schemas.economy import HealthStatus


class ProviderHealthRegistry:
    """Last known status per provider, shared by fetchers and the store."""

    def __init__(self, providers: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._status: dict[str, HealthStatus] = {name: "unknown" for name in providers}

    def mark(self, provider: str, status: HealthStatus) -> None:
        with self._lock:
            self._status[provider] = status

    def get(self, provider: str) -> HealthStatus:
        with self._lock:
            return self._status.get(provider, "unknown")

    def snapshot(self) -> dict[str, HealthStatus]:
        with self._lock:
            return dict(self._status)
