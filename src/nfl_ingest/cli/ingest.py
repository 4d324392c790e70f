from __future__ import annotations

from collections.abc import Callable

import typer

from nfl_ingest.cli.common import (
    fail,
    load_settings,
    report,
    session_scope,
    validate_season,
    validate_week,
)
from nfl_ingest.ingestion.pipeline import run_full_pipeline
from nfl_ingest.ingestion.providers.base.adapter import PerGameStatsAdapter
from nfl_ingest.ingestion.providers.base.errors import ProviderConfigError
from nfl_ingest.ingestion.providers.base.registry import ProviderBinding, default_registry
from nfl_ingest.ingestion.providers.base.types import RunOutcome

SOURCE_HELP = "Data provider override (espn, sportsdataio, mysportsfeeds)."


def _run(label: str, source: str | None, action: Callable[[ProviderBinding], RunOutcome]) -> None:
    settings = load_settings()
    name = source or settings.data_provider
    registry = default_registry()

    try:
        with session_scope(settings) as session, registry.bind(name, session, settings) as binding:
            typer.echo(f"{label} from {binding.name}...")
            outcome = action(binding)
    except ProviderConfigError as e:
        raise fail(str(e)) from e

    report(label, outcome)


def teams_cmd(
    team: str | None = typer.Option(None, "--team", help="Only this team (e.g. KC)."),
    source: str | None = typer.Option(None, "--source", help=SOURCE_HELP),
) -> None:
    """Fetch teams and upsert them by abbreviation."""

    _run("Teams", source, lambda b: b.teams.ingest_teams(team))


def players_cmd(
    team: str | None = typer.Option(None, "--team", help="Only this team's roster."),
    source: str | None = typer.Option(None, "--source", help=SOURCE_HELP),
) -> None:
    """Fetch rosters for every stored team (or one) and upsert players."""

    _run("Players", source, lambda b: b.players.ingest_players(team))


def games_cmd(
    season: int = typer.Option(..., "--season", help="Season year (e.g. 2025)."),
    week: int | None = typer.Option(None, "--week", help="Single week; all 18 when omitted."),
    source: str | None = typer.Option(None, "--source", help=SOURCE_HELP),
) -> None:
    """Fetch the schedule and scores for a season or one week."""

    validate_season(season)
    validate_week(week)
    _run("Games", source, lambda b: b.games.ingest_games(season, week))


def stats_cmd(
    season: int = typer.Option(..., "--season", help="Season year (e.g. 2025)."),
    week: int = typer.Option(..., "--week", help="Week number (1-22)."),
    source: str | None = typer.Option(None, "--source", help=SOURCE_HELP),
) -> None:
    """Fetch player stat lines for one week. Games for that week must exist."""

    validate_season(season)
    validate_week(week)

    def action(b: ProviderBinding) -> RunOutcome:
        # Event ids live only in this binding, so refresh the week first.
        if isinstance(b.stats, PerGameStatsAdapter):
            games = b.games.ingest_games(season, week)
            if not games.succeeded:
                return games
        return b.stats.ingest_stats(season, week)

    _run("Stats", source, action)


def all_cmd(
    season: int = typer.Option(..., "--season", help="Season year (e.g. 2025)."),
    source: str | None = typer.Option(None, "--source", help=SOURCE_HELP),
) -> None:
    """Run teams, players and games for a season in order."""

    validate_season(season)
    _run("Pipeline", source, lambda b: run_full_pipeline(b, season))


def providers_cmd() -> None:
    """List registered providers and their configured auth mode."""

    settings = load_settings()
    for name in default_registry().names():
        cfg = settings.provider_config(name)
        marker = "*" if name == settings.data_provider.strip().lower() else " "
        typer.echo(
            " ".join(
                [
                    f"{marker} {name}",
                    f"auth={cfg.auth_mode.value}",
                    f"key={'set' if cfg.api_key else 'missing'}",
                    f"delay_ms={cfg.request_delay_ms}",
                    f"base_url={cfg.base_url}",
                ]
            )
        )
