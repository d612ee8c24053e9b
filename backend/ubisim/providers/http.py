from __future__ import annotations

import http.client
import json
import socket
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ubisim.errors import ProviderError


def build_url(base_url: str, path: str, params: dict[str, str]) -> str:
    return f"{base_url.rstrip('/')}{path}?{urlencode(params)}"


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (TimeoutError, socket.timeout)):
        return True
    reason = getattr(exc, "reason", None)
    return isinstance(reason, (TimeoutError, socket.timeout))


def get_json(
    url: str,
    provider: str,
    signal_id: str,
    timeout: float,
    headers: dict[str, str] | None = None,
) -> Any:
    request = Request(url, headers=headers or {})
    try:
        with urlopen(request, timeout=timeout) as response:
            body = response.read().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProviderError(
            f"{provider} returned a body that is not UTF-8",
            provider=provider,
            kind="empty_response",
            signal_id=signal_id,
        ) from exc
    except HTTPError as exc:
        raise ProviderError(
            f"{provider} returned HTTP {exc.code}",
            provider=provider,
            kind="http_error",
            signal_id=signal_id,
            status_code=exc.code,
        ) from exc
    except (URLError, http.client.HTTPException, OSError) as exc:
        kind = "timeout" if _is_timeout(exc) else "network_error"
        raise ProviderError(
            f"{provider} request failed: {exc}",
            provider=provider,
            kind=kind,
            signal_id=signal_id,
        ) from exc

    if not body.strip():
        raise ProviderError(
            f"{provider} returned an empty body",
            provider=provider,
            kind="empty_response",
            signal_id=signal_id,
        )
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise ProviderError(
            f"{provider} returned invalid JSON",
            provider=provider,
            kind="empty_response",
            signal_id=signal_id,
        ) from exc
