from __future__ import annotations

from sqlalchemy.orm import Session

from nfl_ingest.db.models.core.player import Player
from nfl_ingest.db.repos.base import BaseRepository


class PlayerRepository(BaseRepository[Player]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Player)

    def find_by_natural_key(self, name: str, team_id: int) -> Player | None:
        return self.first_where(Player.name == name, Player.team_id == team_id)

    def by_team(self, team_id: int) -> list[Player]:
        return self.all_where(Player.team_id == team_id)
