"""
Engine error hierarchy.

Transient provider failures are retried inside the fetch layer and never
reach callers. Exhausted fetches degrade to "field unchanged" at the store.
Calculator input errors are surfaced to the caller.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

ProviderErrorKind = Literal["timeout", "http_error", "empty_response", "network_error"]

TRANSIENT_KINDS: frozenset[str] = frozenset({"timeout", "network_error"})


class UbiSimError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ProviderError(UbiSimError):
    """A single provider call failed."""

    def __init__(
        self,
        message: str,
        provider: str,
        kind: ProviderErrorKind,
        signal_id: str = "",
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.kind = kind
        self.signal_id = signal_id
        self.status_code = status_code

    @property
    def transient(self) -> bool:
        return self.kind in TRANSIENT_KINDS

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "provider": self.provider,
                "kind": self.kind,
                "signal_id": self.signal_id,
                "status_code": self.status_code,
            }
        )
        return data


class ExhaustedError(UbiSimError):
    """All attempts for a signal were consumed without a value."""

    def __init__(
        self,
        provider: str,
        signal_id: str,
        attempts: int,
        last_error: ProviderError,
    ) -> None:
        super().__init__(
            f"{provider}:{signal_id} failed after {attempts} attempt(s): {last_error.message}"
        )
        self.provider = provider
        self.signal_id = signal_id
        self.attempts = attempts
        self.last_error = last_error

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "provider": self.provider,
                "signal_id": self.signal_id,
                "attempts": self.attempts,
                "last_error": self.last_error.to_dict(),
            }
        )
        return data


class InvalidInputError(UbiSimError):
    """The calculator received an out-of-domain value."""

    def __init__(self, field: str, value: Any, reason: str = "out of range") -> None:
        super().__init__(f"Invalid {field}: {value!r} ({reason})")
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({"field": self.field, "value": repr(self.value)})
        return data


class RefreshError(UbiSimError):
    """The refresh cycle itself could not run to completion."""
