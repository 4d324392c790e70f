from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Mapping, TypeVar

import httpx
import structlog

from .errors import (
    ProviderDecodeError,
    ProviderRateLimited,
    ProviderRequestError,
    ProviderStatusError,
    ProviderTimeout,
)
from .rate_limiter import RateLimiter
from .resilience import ResiliencePolicy
from .types import FailureKind, FetchFailure, FetchOutcome

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Objects or arrays; SportsData.io answers with bare arrays.
Payload = Any


@dataclass
class BaseHttpClient:
    """
    Provider-agnostic HTTP client wrapper.

    - Uses a single underlying httpx.Client for connection pooling.
    - Classifies every failure into a ProviderError subclass.
    - Headers (user agent, auth, custom) are bound once at construction.
    - ``timeout_s`` on a request is a deadline for the whole attempt,
      body included, not only for each connect/read phase.
    """

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.BaseTransport | None = None

    _monotonic: Callable[[], float] = field(default=time.monotonic, repr=False)

    def __post_init__(self) -> None:
        self._client = httpx.Client(
            base_url=self.base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            headers=dict(self.headers),
            transport=self.transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> BaseHttpClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout_s: float | None = None,
    ) -> tuple[httpx.Response, bytes]:
        """
        Perform an HTTP request and return the response with its decoded body.

        Raises ProviderTimeout / ProviderRequestError on transport issues,
        ProviderStatusError (incl. ProviderRateLimited) on non-2xx, and
        ProviderDecodeError when the content encoding cannot be undone.
        """
        timeout = (
            httpx.Timeout(timeout_s, connect=min(timeout_s, self.connect_timeout_s))
            if timeout_s is not None
            else httpx.USE_CLIENT_DEFAULT
        )
        deadline = self._monotonic() + timeout_s if timeout_s is not None else None

        try:
            with self._client.stream(
                method=method,
                url=path.lstrip("/"),
                params=params,
                timeout=timeout,
            ) as resp:
                if resp.status_code == 429:
                    raise ProviderRateLimited()

                if not resp.is_success:
                    raise ProviderStatusError(
                        f"HTTP {resp.status_code} for {method} {resp.request.url}",
                        status_code=resp.status_code,
                    )

                chunks: list[bytes] = []
                for chunk in resp.iter_bytes():
                    chunks.append(chunk)
                    if deadline is not None and self._monotonic() > deadline:
                        raise ProviderTimeout(
                            f"Exceeded {timeout_s}s reading body: {method} {path}"
                        )
                return resp, b"".join(chunks)
        except httpx.TimeoutException as e:
            raise ProviderTimeout(f"Timed out: {method} {path}") from e
        except httpx.DecodingError as e:
            raise ProviderDecodeError(
                f"Could not decode response body: {e}", context={"path": path}
            ) from e
        except httpx.TransportError as e:
            raise ProviderRequestError(f"{type(e).__name__}: {e}") from e
        except httpx.RequestError as e:
            raise ProviderRequestError(f"{type(e).__name__}: {e}") from e

    def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout_s: float | None = None,
    ) -> Payload:
        """Perform an HTTP request and return parsed JSON (object or array)."""
        resp, body = self._send(method, path, params=params, timeout_s=timeout_s)
        try:
            return json.loads(body)
        except ValueError as e:
            raise ProviderDecodeError(
                "Response was not valid JSON.",
                context={
                    "url": str(resp.request.url),
                    "body_prefix": body[:120].decode(errors="replace"),
                },
            ) from e

    def request_text(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout_s: float | None = None,
    ) -> str:
        """Perform an HTTP request and return the body as text (HTML pages)."""
        resp, body = self._send(method, path, params=params, timeout_s=timeout_s)
        return body.decode(resp.encoding or "utf-8", errors="replace")

    def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout_s: float | None = None,
    ) -> Payload:
        return self.request_json("GET", path, params=params, timeout_s=timeout_s)

    def get_text(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout_s: float | None = None,
    ) -> str:
        return self.request_text("GET", path, params=params, timeout_s=timeout_s)


@dataclass
class FetchClient:
    """Rate-limited, resilient GET + decode for one provider.

    Every network attempt waits on the provider's rate limiter first, so
    retries are paced too. Decode failures are reported as MALFORMED and are
    never retried.
    """

    provider_key: str
    http: BaseHttpClient
    rate_limiter: RateLimiter
    policy: ResiliencePolicy

    def _get(
        self, path: str, params: Mapping[str, Any] | None, read: Callable[..., T]
    ) -> FetchOutcome[T]:
        def attempt(timeout_s: float) -> T:
            self.rate_limiter.wait()
            logger.debug(
                "fetching", provider=self.provider_key, path=path, params=dict(params or {})
            )
            return read(path, params=params, timeout_s=timeout_s)

        return self.policy.execute(attempt)

    def fetch_json(
        self, path: str, params: Mapping[str, Any] | None = None
    ) -> FetchOutcome[Payload]:
        return self._get(path, params, self.http.get_json)

    def fetch_text(
        self, path: str, params: Mapping[str, Any] | None = None
    ) -> FetchOutcome[str]:
        return self._get(path, params, self.http.get_text)

    def fetch(
        self,
        path: str,
        decode: Callable[[Payload], T],
        params: Mapping[str, Any] | None = None,
    ) -> FetchOutcome[T]:
        return self.decode_outcome(path, self.fetch_json(path, params), decode)

    def fetch_page(
        self,
        path: str,
        decode: Callable[[str], T],
        params: Mapping[str, Any] | None = None,
    ) -> FetchOutcome[T]:
        """Like ``fetch`` for providers that publish HTML instead of JSON."""
        return self.decode_outcome(path, self.fetch_text(path, params), decode)

    def decode_outcome(
        self, path: str, raw: FetchOutcome[Any], decode: Callable[[Any], T]
    ) -> FetchOutcome[T]:
        """Apply ``decode`` to a fetched payload; shape errors become MALFORMED."""
        if not raw.ok:
            return FetchOutcome.failed(raw.failure)  # type: ignore[arg-type]

        try:
            return FetchOutcome.success(decode(raw.value))
        except ProviderDecodeError as e:
            message = str(e)
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            message = f"Unexpected payload shape: {type(e).__name__}: {e}"

        logger.error("payload decode failed", provider=self.provider_key, path=path, error=message)
        return FetchOutcome.failed(FetchFailure(kind=FailureKind.MALFORMED, message=message))

    def close(self) -> None:
        self.http.close()
