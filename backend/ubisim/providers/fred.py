from __future__ import annotations

from ubisim.config.settings import ProviderSettings
from ubisim.providers.base import ProviderClient
from ubisim.providers.http import build_url, get_json


_OBSERVATIONS_PATH = "/fred/series/observations"
_MISSING_VALUE = "."


class FredClient(ProviderClient):
    """Latest observation of a FRED series."""

    name = "fred"

    def __init__(self, provider_settings: ProviderSettings) -> None:
        super().__init__(timeout=provider_settings.timeout_seconds)
        self._settings = provider_settings

    def fetch_sync(self, signal_id: str) -> str:
        api_key = self._settings.fred_api_key
        if not api_key:
            raise self._missing_key(signal_id)

        url = build_url(
            self._settings.fred_base_url,
            _OBSERVATIONS_PATH,
            {
                "series_id": signal_id,
                "api_key": api_key,
                "file_type": "json",
                "limit": "1",
                "sort_order": "desc",
            },
        )
        payload = get_json(url, self.name, signal_id, self._timeout)
        if not isinstance(payload, dict):
            raise self._empty(signal_id, "FRED payload is not an object")

        observations = payload.get("observations") or []
        if not observations or not isinstance(observations[0], dict):
            raise self._empty(signal_id, f"FRED series {signal_id} has no observations")

        value = observations[0].get("value")
        if value is None or str(value).strip() in ("", _MISSING_VALUE):
            raise self._empty(signal_id, f"FRED series {signal_id} has no latest value")
        return str(value)
