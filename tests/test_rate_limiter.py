from __future__ import annotations

import threading
import time

from nfl_ingest.ingestion.providers.base.rate_limiter import RateLimiter, rate_limiter_for


def test_rate_limiter_first_call_does_not_wait() -> None:
    sleeps: list[float] = []
    limiter = RateLimiter(min_interval_s=1.0, _sleep=sleeps.append, _monotonic=lambda: 10.0)

    assert limiter.wait() == 0.0
    assert sleeps == []
    assert limiter.last_request_monotonic == 10.0


def test_rate_limiter_sleeps_for_remaining_interval() -> None:
    sleeps: list[float] = []
    t = 0.0

    def fake_monotonic() -> float:
        return t

    def fake_sleep(seconds: float) -> None:
        nonlocal t
        sleeps.append(seconds)
        t += seconds

    limiter = RateLimiter(min_interval_s=1.0, _sleep=fake_sleep, _monotonic=fake_monotonic)
    limiter.wait()

    t = 0.25
    limiter.wait()
    assert sleeps == [0.75]
    assert limiter.last_request_monotonic == 1.0

    # Enough time has passed; no sleep.
    t = 5.0
    limiter.wait()
    assert sleeps == [0.75]


def test_rate_limiter_zero_interval_never_sleeps() -> None:
    sleeps: list[float] = []
    limiter = RateLimiter(min_interval_s=0.0, _sleep=sleeps.append, _monotonic=lambda: 1.0)
    for _ in range(5):
        limiter.wait()
    assert sleeps == []


def test_rate_limiter_spaces_concurrent_callers() -> None:
    limiter = RateLimiter(min_interval_s=0.02)
    granted: list[int] = []
    lock = threading.Lock()

    def worker(i: int) -> None:
        limiter.wait()
        with lock:
            granted.append(i)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(5)]
    started = time.monotonic()
    for th in threads:
        th.start()
    for th in threads:
        th.join()
    elapsed = time.monotonic() - started

    # Nobody is dropped or coalesced; five grants need four full intervals.
    assert sorted(granted) == [0, 1, 2, 3, 4]
    assert elapsed >= 4 * 0.02 * 0.9


def test_rate_limiter_serves_waiting_callers_in_arrival_order() -> None:
    release = threading.Event()
    served: list[str] = []

    def gated_sleep(seconds: float) -> None:
        # Only the caller being served sleeps, so this records service order.
        served.append(threading.current_thread().name)
        release.wait(timeout=5)

    limiter = RateLimiter(min_interval_s=60.0, _sleep=gated_sleep)
    limiter.wait()

    threads: list[threading.Thread] = []
    for i in range(5):
        th = threading.Thread(target=limiter.wait, name=f"caller-{i}")
        th.start()
        threads.append(th)
        deadline = time.monotonic() + 5
        while limiter.pending < i + 1 and time.monotonic() < deadline:
            time.sleep(0.001)

    release.set()
    for th in threads:
        th.join(timeout=5)

    assert served == [f"caller-{i}" for i in range(5)]
    assert limiter.pending == 0


def test_rate_limiter_for_is_shared_per_provider() -> None:
    a = rate_limiter_for("ESPN", 1.0)
    b = rate_limiter_for("espn", 2.0)
    c = rate_limiter_for("sportsdataio", 1.0)

    assert a is b
    assert a.min_interval_s == 2.0
    assert a is not c
