from __future__ import annotations

from nfl_ingest.db.enums import ProviderEnum
from nfl_ingest.ingestion.providers.base.adapter import AdapterContext
from nfl_ingest.ingestion.providers.base.registry import AdapterSet, ProviderRegistry
from nfl_ingest.ingestion.providers.profootballreference.adapters import (
    ProFootballReferenceGameAdapter,
    ProFootballReferencePlayerAdapter,
    ProFootballReferenceStatsAdapter,
    ProFootballReferenceTeamAdapter,
)


def build_profootballreference_adapters(ctx: AdapterContext) -> AdapterSet:
    return AdapterSet(
        teams=ProFootballReferenceTeamAdapter(ctx),
        players=ProFootballReferencePlayerAdapter(ctx),
        games=ProFootballReferenceGameAdapter(ctx),
        stats=ProFootballReferenceStatsAdapter(ctx),
    )


def register_profootballreference(registry: ProviderRegistry) -> None:
    registry.register(ProviderEnum.PROFOOTBALLREFERENCE.value, build_profootballreference_adapters)
