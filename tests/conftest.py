from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
import sqlalchemy as sa
from sqlalchemy.orm import Session

import nfl_ingest.db.models  # noqa: F401
from nfl_ingest.core.config import Settings
from nfl_ingest.db.base import Base
from nfl_ingest.ingestion.providers.base.rate_limiter import reset_rate_limiters
from nfl_ingest.ingestion.providers.base.registry import ProviderBinding, default_registry


class Router:
    """MockTransport handler routing on URL path suffix; records every request."""

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path_suffix: str, response: Any) -> None:
        # response: httpx.Response, a list of them (served in order, last repeats),
        # a JSON-able object, or a callable(request) -> httpx.Response.
        self.routes[path_suffix] = response

    def calls(self, path_suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(path_suffix)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # Longest suffix wins so "/teams" does not shadow "/teams/12/roster".
        for suffix in sorted(self.routes, key=len, reverse=True):
            if request.url.path.endswith(suffix):
                return self._respond(self.routes[suffix], request)
        return httpx.Response(404, json={"error": f"no route for {request.url.path}"})

    @staticmethod
    def _respond(route: Any, request: httpx.Request) -> httpx.Response:
        if callable(route):
            return route(request)
        if isinstance(route, list) and route and isinstance(route[0], httpx.Response):
            return route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)


@pytest.fixture(autouse=True)
def _fresh_rate_limiters() -> Iterator[None]:
    reset_rate_limiters()
    yield
    reset_rate_limiters()


@pytest.fixture
def session() -> Iterator[Session]:
    engine = sa.create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    s = Session(engine)
    try:
        yield s
    finally:
        s.close()
        engine.dispose()


@pytest.fixture
def settings() -> Settings:
    no_delay = {"request_delay_ms": 0, "api_key": "test-key"}
    return Settings(
        _env_file=None,
        data_provider="espn",
        providers={
            "espn": {"request_delay_ms": 0},
            "sportsdataio": no_delay,
            "mysportsfeeds": no_delay,
            "profootballreference": {"request_delay_ms": 0},
        },
        max_retry_attempts=3,
        retry_base_delay_s=0.0,
        request_timeout_seconds=5.0,
    )


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def bind_provider(
    session: Session, settings: Settings, router: Router
) -> Iterator[Callable[..., ProviderBinding]]:
    bindings: list[ProviderBinding] = []
    sleeps: list[float] = []

    def _bind(name: str, *, handler: Callable[[httpx.Request], httpx.Response] | None = None):
        binding = default_registry().bind(
            name,
            session,
            settings,
            transport=httpx.MockTransport(handler or router),
            sleep=sleeps.append,
        )
        bindings.append(binding)
        return binding

    yield _bind

    for b in bindings:
        b.close()
