from __future__ import annotations

from nfl_ingest.db.enums import ProviderEnum
from nfl_ingest.ingestion.providers.base.adapter import AdapterContext
from nfl_ingest.ingestion.providers.base.registry import AdapterSet, ProviderRegistry
from nfl_ingest.ingestion.providers.espn.adapters import (
    EspnGameAdapter,
    EspnPlayerAdapter,
    EspnStatsAdapter,
    EspnTeamAdapter,
)


def build_espn_adapters(ctx: AdapterContext) -> AdapterSet:
    return AdapterSet(
        teams=EspnTeamAdapter(ctx),
        players=EspnPlayerAdapter(ctx),
        games=EspnGameAdapter(ctx),
        stats=EspnStatsAdapter(ctx),
    )


def register_espn(registry: ProviderRegistry) -> None:
    registry.register(ProviderEnum.ESPN.value, build_espn_adapters)
