from __future__ import annotations

from nfl_ingest.db.enums import ProviderEnum
from nfl_ingest.ingestion.providers.base.adapter import AdapterContext
from nfl_ingest.ingestion.providers.base.registry import AdapterSet, ProviderRegistry
from nfl_ingest.ingestion.providers.mysportsfeeds.adapters import (
    MySportsFeedsGameAdapter,
    MySportsFeedsPlayerAdapter,
    MySportsFeedsStatsAdapter,
    MySportsFeedsTeamAdapter,
)


def build_mysportsfeeds_adapters(ctx: AdapterContext) -> AdapterSet:
    return AdapterSet(
        teams=MySportsFeedsTeamAdapter(ctx),
        players=MySportsFeedsPlayerAdapter(ctx),
        games=MySportsFeedsGameAdapter(ctx),
        stats=MySportsFeedsStatsAdapter(ctx),
    )


def register_mysportsfeeds(registry: ProviderRegistry) -> None:
    registry.register(ProviderEnum.MYSPORTSFEEDS.value, build_mysportsfeeds_adapters)
