from __future__ import annotations

from datetime import UTC, datetime

from nfl_ingest.ingestion.providers.base.adapter import (
    GameAdapter,
    PlayerAdapter,
    TeamAdapter,
    WeeklyStatsAdapter,
)
from nfl_ingest.ingestion.providers.base.types import (
    Decoded,
    FetchOutcome,
    GameRecord,
    PlayerRecord,
    StatLineRecord,
    TeamRecord,
)
from nfl_ingest.ingestion.providers.mysportsfeeds import decoders


def current_season() -> int:
    # Team and roster feeds are requested for the current season only.
    return datetime.now(tz=UTC).year


class MySportsFeedsTeamAdapter(TeamAdapter):
    def fetch_teams(self) -> FetchOutcome[Decoded[TeamRecord]]:
        return self.client.fetch(f"/{current_season()}/teams.json", decoders.decode_teams)


class MySportsFeedsPlayerAdapter(PlayerAdapter):
    def fetch_roster(self, team_abbreviation: str) -> FetchOutcome[Decoded[PlayerRecord]]:
        return self.client.fetch(
            "/players.json",
            lambda payload: decoders.decode_players(payload, team_abbreviation=team_abbreviation),
            params={"team": team_abbreviation, "season": current_season()},
        )


class MySportsFeedsGameAdapter(GameAdapter):
    def fetch_week(self, season: int, week: int) -> FetchOutcome[Decoded[GameRecord]]:
        return self.client.fetch(
            f"/{season}/games.json",
            lambda payload: decoders.decode_games(payload, season=season, week=week),
            params={"week": week},
        )


class MySportsFeedsStatsAdapter(WeeklyStatsAdapter):
    def fetch_week_stats(self, season: int, week: int) -> FetchOutcome[Decoded[StatLineRecord]]:
        return self.client.fetch(
            f"/{season}/week/{week}/player_gamelogs.json",
            lambda payload: decoders.decode_gamelogs(payload, season=season, week=week),
        )
