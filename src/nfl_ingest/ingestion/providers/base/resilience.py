"""Retry, circuit breaking and per-attempt timeouts for outbound calls.

The three policies wrap each other in a fixed order::

    retry( circuit_breaker( timeout( attempt ) ) )

Every attempt is a plain callable that raises ``ProviderError`` subclasses;
``ResiliencePolicy.execute`` turns the final result into a ``FetchOutcome``
so callers never see an exception from here.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

import httpx
import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .errors import CircuitOpenError, ProviderError, ProviderTimeout, is_transient
from .types import FetchFailure, FetchOutcome

logger = structlog.get_logger(__name__)

T = TypeVar("T")


# -----------------------------
# Timeout
# -----------------------------


def with_timeout(attempt: Callable[[float], T], timeout_s: float) -> Callable[[], T]:
    """Bind a per-attempt timeout; an expired attempt becomes ProviderTimeout."""

    def bounded() -> T:
        try:
            return attempt(timeout_s)
        except httpx.TimeoutException as e:
            raise ProviderTimeout(f"Request exceeded {timeout_s}s timeout") from e

    return bounded


# -----------------------------
# Circuit breaker
# -----------------------------


class CircuitState(StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreaker:
    """Sliding-window circuit breaker.

    Opens once the window holds at least ``min_throughput`` samples and the
    failure ratio reaches ``failure_ratio``. While open every call is
    rejected without running; after ``break_s`` one trial call is let through
    (half-open) and its result closes or re-opens the circuit. Only transient
    failures count against the circuit.
    """

    name: str
    failure_ratio: float = 0.7
    min_throughput: int = 3
    sampling_s: float = 30.0
    break_s: float = 15.0

    _monotonic: Any = field(default=time.monotonic, repr=False)

    state: CircuitState = field(default=CircuitState.CLOSED, init=False)
    _window: deque[tuple[float, bool]] = field(default_factory=deque, init=False, repr=False)
    _opened_at: float | None = field(default=None, init=False, repr=False)
    _trial_in_flight: bool = field(default=False, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def call(self, fn: Callable[[], T]) -> T:
        self.before_call()
        try:
            result = fn()
        except ProviderError as exc:
            if is_transient(exc):
                self.record_failure()
            else:
                self.record_success()
            raise
        except BaseException:
            self.release_trial()
            raise
        self.record_success()
        return result

    def before_call(self) -> None:
        with self._lock:
            now = float(self._monotonic())
            if self.state == CircuitState.OPEN:
                assert self._opened_at is not None
                remaining = self.break_s - (now - self._opened_at)
                if remaining > 0:
                    raise CircuitOpenError(
                        f"Circuit '{self.name}' is open; retry in {remaining:.1f}s"
                    )
                self.state = CircuitState.HALF_OPEN
                self._trial_in_flight = False
                logger.info("circuit half-open", circuit=self.name)

            if self.state == CircuitState.HALF_OPEN:
                if self._trial_in_flight:
                    raise CircuitOpenError(f"Circuit '{self.name}' is half-open; trial call in flight")
                self._trial_in_flight = True

    def record_success(self) -> None:
        with self._lock:
            now = float(self._monotonic())
            if self.state == CircuitState.HALF_OPEN:
                self.state = CircuitState.CLOSED
                self._trial_in_flight = False
                self._window.clear()
                self._opened_at = None
                logger.info("circuit closed", circuit=self.name)
                return
            self._window.append((now, False))
            self._prune(now)

    def record_failure(self) -> None:
        with self._lock:
            now = float(self._monotonic())
            if self.state == CircuitState.HALF_OPEN:
                self._open(now, reason="trial call failed")
                return
            self._window.append((now, True))
            self._prune(now)

            samples = len(self._window)
            failures = sum(1 for _, failed in self._window if failed)
            if samples >= self.min_throughput and failures / samples >= self.failure_ratio:
                self._open(now, reason=f"{failures}/{samples} failures in window")

    def release_trial(self) -> None:
        with self._lock:
            self._trial_in_flight = False

    def _open(self, now: float, *, reason: str) -> None:
        self.state = CircuitState.OPEN
        self._opened_at = now
        self._trial_in_flight = False
        self._window.clear()
        logger.warning("circuit opened", circuit=self.name, reason=reason, break_s=self.break_s)

    def _prune(self, now: float) -> None:
        cutoff = now - self.sampling_s
        while self._window and self._window[0][0] < cutoff:
            self._window.popleft()


# -----------------------------
# Retry
# -----------------------------


@dataclass
class RetryPolicy:
    """Exponential-backoff retry over the transient failure set (tenacity)."""

    name: str
    max_attempts: int = 3
    base_delay_s: float = 2.0

    _sleep: Any = field(default=time.sleep, repr=False)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "retrying request",
            pipeline=self.name,
            attempt=retry_state.attempt_number,
            delay_s=delay,
            status_code=getattr(exc, "status_code", None),
            error=str(exc) if exc else None,
        )

    def call(self, fn: Callable[[], T]) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay_s, exp_base=2),
            retry=retry_if_exception(is_transient),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        return retrying(fn)


# -----------------------------
# Composition
# -----------------------------


@dataclass
class ResiliencePolicy:
    retry: RetryPolicy
    breaker: CircuitBreaker
    timeout_s: float = 30.0

    def execute(self, attempt: Callable[[float], T]) -> FetchOutcome[T]:
        """Run ``attempt(timeout_s)`` under retry -> breaker -> timeout."""

        network_attempts = 0
        bounded = with_timeout(attempt, self.timeout_s)

        def counted() -> T:
            nonlocal network_attempts
            network_attempts += 1
            return bounded()

        def guarded() -> T:
            return self.breaker.call(counted)

        try:
            value = self.retry.call(guarded)
        except ProviderError as exc:
            failure = FetchFailure.from_error(exc, attempts=network_attempts)
            logger.warning(
                "request failed",
                pipeline=self.retry.name,
                kind=failure.kind.value,
                status_code=failure.status_code,
                attempts=network_attempts,
                error=failure.message,
            )
            return FetchOutcome.failed(failure)
        return FetchOutcome.success(value)
