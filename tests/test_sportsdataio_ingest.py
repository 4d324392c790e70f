from __future__ import annotations

from sqlalchemy.orm import Session

from nfl_ingest.db.models.core.player import Player
from nfl_ingest.db.models.core.player_game_stats import PlayerGameStats
from nfl_ingest.ingestion.providers.base.types import FailureKind

TEAMS = [
    {"TeamID": 16, "Key": "KC", "City": "Kansas City", "Name": "Chiefs", "FullName": "Kansas City Chiefs", "Conference": "AFC", "Division": "West"},
    {"TeamID": 4, "Key": "BUF", "City": "Buffalo", "Name": "Bills", "FullName": "Buffalo Bills", "Conference": "AFC", "Division": "East"},
]

SCORES = [
    {"GameKey": "202410101", "Date": "2024-09-05T20:20:00", "HomeTeam": "KC", "AwayTeam": "BUF", "HomeScore": 27, "AwayScore": 20},
]

STATS = [
    {"PlayerID": 18890, "Name": "Patrick Mahomes", "Team": "KC", "PassingAttempts": 30, "PassingCompletions": 21, "PassingYards": 291.0, "PassingTouchdowns": 2, "PassingInterceptions": 0, "RushingAttempts": 4, "RushingYards": 18},
    # Kicker with no offensive stats.
    {"PlayerID": 17, "Name": "Harrison Butker", "Team": "KC", "PassingAttempts": 0, "RushingAttempts": 0, "Receptions": 0},
]


def test_header_auth_on_every_request(bind_provider, router) -> None:
    router.add("/scores/json/Teams", TEAMS)
    bind_provider("SportsDataIO").teams.ingest_teams()

    request = router.requests[0]
    assert request.headers["Ocp-Apim-Subscription-Key"] == "test-key"
    assert request.url.path == "/v3/nfl/scores/json/Teams"


def test_object_instead_of_array_is_malformed_and_not_retried(bind_provider, router) -> None:
    router.add("/scores/json/Teams", {"Message": "Invalid subscription"})
    outcome = bind_provider("sportsdataio").teams.ingest_teams()

    assert not outcome.succeeded
    assert outcome.errors[0].startswith(FailureKind.MALFORMED.value)
    assert len(router.calls("/scores/json/Teams")) == 1


def test_rosters_and_weekly_stats(bind_provider, router, session: Session) -> None:
    router.add("/scores/json/Teams", TEAMS)
    router.add(
        "/scores/json/Players/KC",
        [{"PlayerID": 18890, "Name": "Patrick Mahomes", "Team": "KC", "Position": "QB", "Number": 15, "Height": "6'2\"", "Weight": 225, "College": "Texas Tech"}],
    )
    router.add("/scores/json/Players/BUF", [])
    router.add("/scores/json/ScoresByWeek/2024/1", SCORES)
    router.add("/stats/json/PlayerGameStatsByWeek/2024/1", STATS)
    binding = bind_provider("sportsdataio")

    binding.teams.ingest_teams()
    players = binding.players.ingest_players()
    games = binding.games.ingest_games(2024, 1)
    stats = binding.stats.ingest_stats(2024, 1)

    assert players.succeeded and players.records_processed == 1
    assert games.records_processed == 1
    assert stats.succeeded and stats.records_processed == 1

    assert session.query(Player).one().height == "6-2"
    line = session.query(PlayerGameStats).one()
    assert line.pass_yards == 291
    assert line.rush_attempts == 4


def test_stat_line_for_unknown_player_is_counted_as_failed(bind_provider, router) -> None:
    router.add("/scores/json/Teams", TEAMS)
    router.add("/scores/json/ScoresByWeek/2024/1", SCORES)
    router.add("/stats/json/PlayerGameStatsByWeek/2024/1", STATS[:1])
    binding = bind_provider("sportsdataio")
    binding.teams.ingest_teams()
    binding.games.ingest_games(2024, 1)

    outcome = binding.stats.ingest_stats(2024, 1)

    assert not outcome.succeeded
    assert outcome.records_processed == 0
    assert outcome.records_failed == 1
    assert "Patrick Mahomes" in outcome.errors[0]
