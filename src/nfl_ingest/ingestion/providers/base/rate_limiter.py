from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class RateLimiter:
    """Paces calls to one provider to a minimum interval.

    Callers take a ticket on entry and are served strictly by ticket, one at
    a time, so concurrent callers proceed in arrival order. Nothing is
    dropped or coalesced.
    """

    min_interval_s: float = 0.0
    last_request_monotonic: float | None = None

    _sleep: Any = field(default=time.sleep, repr=False)
    _monotonic: Any = field(default=time.monotonic, repr=False)
    _turn: threading.Condition = field(default_factory=threading.Condition, repr=False)
    _next_ticket: int = field(default=0, init=False, repr=False)
    _serving: int = field(default=0, init=False, repr=False)

    @property
    def pending(self) -> int:
        """Callers inside ``wait()``, including the one being served."""
        with self._turn:
            return self._next_ticket - self._serving

    def wait(self) -> float:
        """Block until the interval since the previous call has elapsed.

        Returns the number of seconds slept.
        """
        with self._turn:
            ticket = self._next_ticket
            self._next_ticket += 1
            while ticket != self._serving:
                self._turn.wait()

        try:
            slept = 0.0
            if self.min_interval_s > 0.0 and self.last_request_monotonic is not None:
                elapsed = float(self._monotonic()) - self.last_request_monotonic
                remaining = self.min_interval_s - elapsed
                if remaining > 0:
                    logger.debug("throttling request", delay_s=round(remaining, 3))
                    self._sleep(remaining)
                    slept = remaining
            self.last_request_monotonic = float(self._monotonic())
            return slept
        finally:
            with self._turn:
                self._serving += 1
                self._turn.notify_all()


_limiters: dict[str, RateLimiter] = {}
_limiters_lock = threading.Lock()


def rate_limiter_for(provider_key: str, min_interval_s: float) -> RateLimiter:
    """Process-wide limiter for a provider (shared by every binding of it)."""
    key = provider_key.strip().lower()
    with _limiters_lock:
        limiter = _limiters.get(key)
        if limiter is None:
            limiter = RateLimiter(min_interval_s=min_interval_s)
            _limiters[key] = limiter
        else:
            limiter.min_interval_s = min_interval_s
        return limiter


def reset_rate_limiters() -> None:
    with _limiters_lock:
        _limiters.clear()
