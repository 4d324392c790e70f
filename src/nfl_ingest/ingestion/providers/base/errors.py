from __future__ import annotations


class ProviderError(RuntimeError):
    """Base exception for provider-related failures."""


class ProviderConfigError(ProviderError):
    """Unknown provider or invalid provider settings. Fatal at startup."""


class ProviderRequestError(ProviderError):
    """HTTP/network/transport layer failures (connection errors, etc.)."""


class ProviderTimeout(ProviderRequestError):
    """A single attempt exceeded the configured request timeout."""


class ProviderStatusError(ProviderRequestError):
    """Provider answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderRateLimited(ProviderStatusError):
    """Provider throttled the request (HTTP 429)."""

    def __init__(self, message: str = "Provider rate limited the request (HTTP 429).") -> None:
        super().__init__(message, status_code=429)


class CircuitOpenError(ProviderError):
    """Circuit breaker is open; the call was rejected without a network attempt."""


class ProviderDecodeError(ProviderError):
    """Payload could not be decoded or had an unexpected shape."""

    def __init__(self, message: str, context: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"


TRANSIENT_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def is_transient(exc: BaseException) -> bool:
    """Transient failures are expected to self-correct on retry."""
    if isinstance(exc, ProviderStatusError):
        return exc.status_code in TRANSIENT_STATUS_CODES
    return isinstance(exc, ProviderRequestError)
