from __future__ import annotations

import typer

from nfl_ingest.cli.common import fail, load_settings, session_scope, validate_season, validate_week
from nfl_ingest.db.enums import ConferenceEnum
from nfl_ingest.db.repos.core.game_repo import GameRepository
from nfl_ingest.db.repos.core.player_repo import PlayerRepository
from nfl_ingest.db.repos.core.stats_repo import PlayerGameStatsRepository
from nfl_ingest.db.repos.core.team_repo import TeamRepository

app = typer.Typer(help="Show what is stored locally.")


@app.command("teams")
def list_teams_cmd(
    conference: str | None = typer.Option(None, "--conference", help="AFC or NFC."),
) -> None:
    """List stored teams, optionally for one conference."""

    if conference is not None and conference.upper() not in {c.value for c in ConferenceEnum}:
        raise fail(f"Invalid conference '{conference}'. Must be AFC or NFC")

    with session_scope(load_settings()) as session:
        repo = TeamRepository(session)
        teams = repo.by_conference(conference) if conference else repo.list()
        for t in sorted(teams, key=lambda t: (t.conference, t.division, t.abbreviation)):
            typer.echo(f"{t.abbreviation:<4} {t.name:<28} {t.conference} {t.division}")
        typer.echo(f"{len(teams)} teams")


@app.command("players")
def list_players_cmd(
    team: str = typer.Option(..., "--team", help="Team abbreviation (e.g. KC)."),
) -> None:
    """List the stored roster of one team."""

    with session_scope(load_settings()) as session:
        stored = TeamRepository(session).find_by_natural_key(team)
        if stored is None:
            raise fail(f"Team '{team}' not found. Ingest teams first.")
        players = PlayerRepository(session).by_team(stored.id)
        for p in sorted(players, key=lambda p: (p.position, p.jersey_number or 0, p.name)):
            number = "" if p.jersey_number is None else f"#{p.jersey_number}"
            typer.echo(f"{p.position:<4} {number:<4} {p.name}")
        typer.echo(f"{len(players)} players")


@app.command("games")
def list_games_cmd(
    season: int = typer.Option(..., "--season", help="Season year."),
    week: int = typer.Option(..., "--week", help="Week number (1-22)."),
) -> None:
    """List stored games for one week with their stat line counts."""

    validate_season(season)
    validate_week(week)

    with session_scope(load_settings()) as session:
        games = GameRepository(session).for_week(season, week)
        stats_repo = PlayerGameStatsRepository(session)
        for g in games:
            score = (
                f"{g.away_score}-{g.home_score}"
                if g.home_score is not None and g.away_score is not None
                else "-"
            )
            typer.echo(
                f"{g.away_team.abbreviation:>4} @ {g.home_team.abbreviation:<4} "
                f"{score:<7} stat_lines={len(stats_repo.for_game(g.id))}"
            )
        typer.echo(f"{len(games)} games")


def status_cmd() -> None:
    """Row counts for every stored entity."""

    with session_scope(load_settings()) as session:
        typer.echo(
            " ".join(
                [
                    f"teams={TeamRepository(session).count()}",
                    f"players={PlayerRepository(session).count()}",
                    f"games={GameRepository(session).count()}",
                    f"stat_lines={PlayerGameStatsRepository(session).count()}",
                ]
            )
        )
