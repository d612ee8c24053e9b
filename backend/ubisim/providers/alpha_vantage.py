from __future__ import annotations

from ubisim.config.settings import ProviderSettings
from ubisim.providers.base import ProviderClient
from ubisim.providers.http import build_url, get_json


_QUERY_PATH = "/query"


class AlphaVantageClient(ProviderClient):
    """Latest price from the GLOBAL_QUOTE endpoint."""

    name = "alpha_vantage"

    def __init__(self, provider_settings: ProviderSettings) -> None:
        super().__init__(timeout=provider_settings.timeout_seconds)
        self._settings = provider_settings

    def fetch_sync(self, signal_id: str) -> str:
        api_key = self._settings.alpha_vantage_api_key
        if not api_key:
            raise self._missing_key(signal_id)

        url = build_url(
            self._settings.alpha_vantage_base_url,
            _QUERY_PATH,
            {"function": "GLOBAL_QUOTE", "symbol": signal_id, "apikey": api_key},
        )
        payload = get_json(url, self.name, signal_id, self._timeout)
        if not isinstance(payload, dict):
            raise self._empty(signal_id, "Alpha Vantage payload is not an object")

        # Rate limiting and bad symbols come back as 200 with a message body.
        for key in ("Error Message", "Note", "Information"):
            if key in payload:
                raise self._empty(signal_id, f"Alpha Vantage: {payload[key]}")

        quote = payload.get("Global Quote") or {}
        price = quote.get("05. price") if isinstance(quote, dict) else None
        if not price:
            raise self._empty(signal_id, f"Alpha Vantage has no quote for {signal_id}")
        return str(price)
