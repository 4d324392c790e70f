from __future__ import annotations

import structlog

from nfl_ingest.ingestion.providers.base.registry import ProviderBinding
from nfl_ingest.ingestion.providers.base.types import RunOutcome

logger = structlog.get_logger(__name__)


def run_full_pipeline(binding: ProviderBinding, season: int) -> RunOutcome:
    """Teams, then players, then every regular-season week of games.

    Players and games depend on stored teams, so a failed teams step stops
    the run. Later steps run regardless of each other.
    """
    log = logger.bind(provider=binding.name, season=season)
    log.info("pipeline started")

    teams = binding.teams.ingest_teams()
    log.info("pipeline step", step="teams", succeeded=teams.succeeded, processed=teams.records_processed)
    if not teams.succeeded:
        log.error("pipeline halted", step="teams", message=teams.message)
        return RunOutcome.failure(
            "Pipeline stopped: teams ingest failed",
            [teams.message, *teams.errors],
            failed=teams.records_failed,
        )

    players = binding.players.ingest_players()
    log.info(
        "pipeline step", step="players", succeeded=players.succeeded, processed=players.records_processed
    )

    games = binding.games.ingest_games(season)
    log.info("pipeline step", step="games", succeeded=games.succeeded, processed=games.records_processed)

    steps = (teams, players, games)
    total = sum(s.records_processed for s in steps)
    errors = [s.message for s in steps if not s.succeeded]
    for s in steps:
        errors.extend(s.errors)

    log.info("pipeline finished", processed=total, failed_steps=sum(not s.succeeded for s in steps))
    return RunOutcome(
        succeeded=all(s.succeeded for s in steps),
        records_processed=total,
        records_failed=sum(s.records_failed for s in steps),
        message=f"Pipeline complete: {total} records across teams, players and games",
        errors=errors,
    )
