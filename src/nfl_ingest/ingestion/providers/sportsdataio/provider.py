from __future__ import annotations

from nfl_ingest.db.enums import ProviderEnum
from nfl_ingest.ingestion.providers.base.adapter import AdapterContext
from nfl_ingest.ingestion.providers.base.registry import AdapterSet, ProviderRegistry
from nfl_ingest.ingestion.providers.sportsdataio.adapters import (
    SportsDataGameAdapter,
    SportsDataPlayerAdapter,
    SportsDataStatsAdapter,
    SportsDataTeamAdapter,
)


def build_sportsdataio_adapters(ctx: AdapterContext) -> AdapterSet:
    return AdapterSet(
        teams=SportsDataTeamAdapter(ctx),
        players=SportsDataPlayerAdapter(ctx),
        games=SportsDataGameAdapter(ctx),
        stats=SportsDataStatsAdapter(ctx),
    )


def register_sportsdataio(registry: ProviderRegistry) -> None:
    registry.register(ProviderEnum.SPORTSDATAIO.value, build_sportsdataio_adapters)
