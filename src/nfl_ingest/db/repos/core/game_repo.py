from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from nfl_ingest.db.models.core.game import Game
from nfl_ingest.db.repos.base import BaseRepository


class GameRepository(BaseRepository[Game]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Game)

    def find_by_natural_key(
        self, *, season: int, week: int, home_team_id: int, away_team_id: int
    ) -> Game | None:
        return self.first_where(
            Game.season == season,
            Game.week == week,
            Game.home_team_id == home_team_id,
            Game.away_team_id == away_team_id,
        )

    def for_week(self, season: int, week: int) -> list[Game]:
        stmt = (
            select(Game)
            .where(Game.season == season, Game.week == week)
            .order_by(Game.game_date, Game.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def for_team_in_week(self, *, season: int, week: int, team_id: int) -> Game | None:
        return self.first_where(
            Game.season == season,
            Game.week == week,
            or_(Game.home_team_id == team_id, Game.away_team_id == team_id),
        )
