from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from sqlalchemy.orm import Session

from nfl_ingest.core.config import Settings
from nfl_ingest.ingestion.reconcile import ReconciliationStore

from .adapter import AdapterContext, GameAdapter, PlayerAdapter, StatsAdapter, TeamAdapter
from .auth import bind_headers
from .client import BaseHttpClient, FetchClient
from .correlation import CorrelationCache
from .errors import ProviderConfigError
from .rate_limiter import rate_limiter_for
from .resilience import CircuitBreaker, ResiliencePolicy, RetryPolicy

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AdapterSet:
    teams: TeamAdapter
    players: PlayerAdapter
    games: GameAdapter
    stats: StatsAdapter


ProviderFactory = Callable[[AdapterContext], AdapterSet]


@dataclass
class ProviderBinding:
    """The four capability adapters of one provider plus what they share."""

    name: str
    teams: TeamAdapter
    players: PlayerAdapter
    games: GameAdapter
    stats: StatsAdapter
    client: FetchClient
    cache: CorrelationCache

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> ProviderBinding:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ProviderRegistry:
    def __init__(self) -> None:
        self._factories: dict[str, ProviderFactory] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().lower()

    def register(self, name: str, factory: ProviderFactory) -> None:
        key = self._key(name)
        if key in self._factories:
            raise ValueError(f"Duplicate provider registration: {key}")
        self._factories[key] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) in self._factories

    def bind(
        self,
        name: str,
        session: Session,
        settings: Settings,
        *,
        transport: httpx.BaseTransport | None = None,
        sleep: Any = None,
    ) -> ProviderBinding:
        """Build a provider's adapters around one shared client and cache.

        Unknown names fail here, before any network activity.
        """
        key = self._key(name)
        factory = self._factories.get(key)
        if factory is None:
            raise ProviderConfigError(
                f"Unknown data provider '{name}'. Registered: {', '.join(self.names()) or 'none'}"
            )

        config = settings.provider_config(key)
        if not config.base_url:
            raise ProviderConfigError(f"Provider '{key}' has no base_url configured")

        http = BaseHttpClient(
            base_url=config.base_url,
            timeout_s=settings.request_timeout_seconds,
            headers=bind_headers(config, user_agent=settings.user_agent),
            transport=transport,
        )

        retry = RetryPolicy(
            name=key,
            max_attempts=settings.max_retry_attempts,
            base_delay_s=settings.retry_base_delay_s,
            _sleep=sleep or time.sleep,
        )
        breaker = CircuitBreaker(
            name=key,
            failure_ratio=settings.breaker_failure_ratio,
            min_throughput=settings.breaker_min_throughput,
            sampling_s=settings.breaker_sampling_s,
            break_s=settings.breaker_break_s,
        )
        policy = ResiliencePolicy(
            retry=retry, breaker=breaker, timeout_s=settings.request_timeout_seconds
        )

        client = FetchClient(
            provider_key=key,
            http=http,
            rate_limiter=rate_limiter_for(key, config.min_interval_s),
            policy=policy,
        )
        cache = CorrelationCache(key)
        ctx = AdapterContext(
            provider_key=key,
            client=client,
            store=ReconciliationStore(session),
            cache=cache,
        )

        adapters = factory(ctx)
        logger.debug("provider bound", provider=key, base_url=config.base_url)
        return ProviderBinding(
            name=key,
            teams=adapters.teams,
            players=adapters.players,
            games=adapters.games,
            stats=adapters.stats,
            client=client,
            cache=cache,
        )


def default_registry() -> ProviderRegistry:
    from nfl_ingest.ingestion.providers.espn.provider import register_espn
    from nfl_ingest.ingestion.providers.mysportsfeeds.provider import register_mysportsfeeds
    from nfl_ingest.ingestion.providers.profootballreference.provider import (
        register_profootballreference,
    )
    from nfl_ingest.ingestion.providers.sportsdataio.provider import register_sportsdataio

    registry = ProviderRegistry()
    register_espn(registry)
    register_sportsdataio(registry)
    register_mysportsfeeds(registry)
    register_profootballreference(registry)
    return registry
