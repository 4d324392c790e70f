from __future__ import annotations

from nfl_ingest.ingestion.providers.base.adapter import (
    GameAdapter,
    PerGameStatsAdapter,
    PlayerAdapter,
    TeamAdapter,
)
from nfl_ingest.ingestion.providers.base.types import (
    Decoded,
    FailureKind,
    FetchFailure,
    FetchOutcome,
    GameRecord,
    PlayerRecord,
    StatLineRecord,
    TeamRecord,
)
from nfl_ingest.ingestion.providers.espn import decoders
from nfl_ingest.ingestion.providers.espn.mappings import to_espn_id

# Regular season on the scoreboard endpoint.
SEASON_TYPE_REGULAR = 2


class EspnTeamAdapter(TeamAdapter):
    def fetch_teams(self) -> FetchOutcome[Decoded[TeamRecord]]:
        return self.client.fetch("/teams", decoders.decode_teams)


class EspnPlayerAdapter(PlayerAdapter):
    def fetch_roster(self, team_abbreviation: str) -> FetchOutcome[Decoded[PlayerRecord]]:
        espn_id = to_espn_id(team_abbreviation)
        if espn_id is None:
            return FetchOutcome.failed(
                FetchFailure(
                    kind=FailureKind.MALFORMED,
                    message=f"No ESPN id mapping for team {team_abbreviation}",
                    attempts=0,
                )
            )
        return self.client.fetch(
            f"/teams/{espn_id}/roster",
            lambda payload: decoders.decode_roster(payload, team_abbreviation=team_abbreviation),
        )


class EspnGameAdapter(GameAdapter):
    def fetch_week(self, season: int, week: int) -> FetchOutcome[Decoded[GameRecord]]:
        return self.client.fetch(
            "/scoreboard",
            lambda payload: decoders.decode_scoreboard(payload, season=season, week=week),
            params={"dates": season, "week": week, "seasontype": SEASON_TYPE_REGULAR},
        )


class EspnStatsAdapter(PerGameStatsAdapter):
    """Box scores are only addressable by ESPN event id, taken from the games fetch."""

    def fetch_game_stats(
        self, native_id: str, *, season: int, week: int, home: str, away: str
    ) -> FetchOutcome[Decoded[StatLineRecord]]:
        return self.client.fetch(
            "/summary",
            lambda payload: decoders.decode_boxscore(
                payload, season=season, week=week, home=home, away=away
            ),
            params={"event": native_id},
        )
