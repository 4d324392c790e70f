from __future__ import annotations

from sqlalchemy.orm import Session

from nfl_ingest.db.models.core.player_game_stats import PlayerGameStats
from nfl_ingest.db.repos.base import BaseRepository


class PlayerGameStatsRepository(BaseRepository[PlayerGameStats]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=PlayerGameStats)

    def find_by_natural_key(self, *, player_id: int, game_id: int) -> PlayerGameStats | None:
        return self.first_where(
            PlayerGameStats.player_id == player_id,
            PlayerGameStats.game_id == game_id,
        )

    def for_game(self, game_id: int) -> list[PlayerGameStats]:
        return self.all_where(PlayerGameStats.game_id == game_id)
