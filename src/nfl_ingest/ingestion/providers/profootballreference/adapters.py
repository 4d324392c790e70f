from __future__ import annotations

from datetime import UTC, datetime

from nfl_ingest.db.models.core.game import Game
from nfl_ingest.ingestion.providers.base.adapter import (
    AdapterContext,
    GameAdapter,
    PerGameStatsAdapter,
    PlayerAdapter,
    TeamAdapter,
)
from nfl_ingest.ingestion.providers.base.correlation import CorrelationKey
from nfl_ingest.ingestion.providers.base.types import (
    Decoded,
    FetchOutcome,
    GameRecord,
    PlayerRecord,
    StatLineRecord,
    TeamRecord,
)
from nfl_ingest.ingestion.providers.profootballreference import decoders
from nfl_ingest.ingestion.providers.profootballreference.mappings import to_pfr


def current_season() -> int:
    # Roster pages are requested for the current season only.
    return datetime.now(tz=UTC).year


class ProFootballReferenceTeamAdapter(TeamAdapter):
    def fetch_teams(self) -> FetchOutcome[Decoded[TeamRecord]]:
        return self.client.fetch_page("/teams/", decoders.decode_teams)


class ProFootballReferencePlayerAdapter(PlayerAdapter):
    def fetch_roster(self, team_abbreviation: str) -> FetchOutcome[Decoded[PlayerRecord]]:
        abbr = team_abbreviation.strip().upper()
        return self.client.fetch_page(
            f"/teams/{to_pfr(abbr)}/{current_season()}_roster.htm",
            lambda html: decoders.decode_roster(html, team_abbreviation=abbr),
        )


class ProFootballReferenceGameAdapter(GameAdapter):
    """The schedule page covers a whole season; it is fetched once per binding."""

    def __init__(self, ctx: AdapterContext) -> None:
        super().__init__(ctx)
        self._schedules: dict[int, FetchOutcome[str]] = {}

    def fetch_week(self, season: int, week: int) -> FetchOutcome[Decoded[GameRecord]]:
        path = f"/years/{season}/games.htm"
        page = self._schedules.get(season)
        if page is None:
            page = self.client.fetch_text(path)
            if page.ok:
                self._schedules[season] = page
        return self.client.decode_outcome(
            path,
            page,
            lambda html: decoders.decode_schedule(html, season=season, week=week),
        )


class ProFootballReferenceStatsAdapter(PerGameStatsAdapter):
    def native_id_for(self, key: CorrelationKey, game: Game) -> str | None:
        native_id = super().native_id_for(key, game)
        if native_id is None and game.game_date is not None:
            native_id = decoders.boxscore_id(game.game_date, game.home_team.abbreviation)
        return native_id

    def fetch_game_stats(
        self, native_id: str, *, season: int, week: int, home: str, away: str
    ) -> FetchOutcome[Decoded[StatLineRecord]]:
        return self.client.fetch_page(
            f"/boxscores/{native_id}.htm",
            lambda html: decoders.decode_boxscore(
                html, season=season, week=week, home=home, away=away
            ),
        )
