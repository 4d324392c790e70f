from __future__ import annotations

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
from nfl_ingest.ingestion.providers.sportsdataio import decoders


class SportsDataTeamAdapter(TeamAdapter):
    def fetch_teams(self) -> FetchOutcome[Decoded[TeamRecord]]:
        return self.client.fetch("/scores/json/Teams", decoders.decode_teams)


class SportsDataPlayerAdapter(PlayerAdapter):
    def fetch_roster(self, team_abbreviation: str) -> FetchOutcome[Decoded[PlayerRecord]]:
        return self.client.fetch(
            f"/scores/json/Players/{team_abbreviation}",
            lambda payload: decoders.decode_players(payload, team_abbreviation=team_abbreviation),
        )


class SportsDataGameAdapter(GameAdapter):
    def fetch_week(self, season: int, week: int) -> FetchOutcome[Decoded[GameRecord]]:
        return self.client.fetch(
            f"/scores/json/ScoresByWeek/{season}/{week}",
            lambda payload: decoders.decode_scores(payload, season=season, week=week),
        )


class SportsDataStatsAdapter(WeeklyStatsAdapter):
    def fetch_week_stats(self, season: int, week: int) -> FetchOutcome[Decoded[StatLineRecord]]:
        return self.client.fetch(
            f"/stats/json/PlayerGameStatsByWeek/{season}/{week}",
            lambda payload: decoders.decode_player_game_stats(payload, season=season, week=week),
        )
