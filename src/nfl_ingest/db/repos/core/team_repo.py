from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from nfl_ingest.db.models.core.team import Team
from nfl_ingest.db.repos.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Team)

    def find_by_natural_key(self, abbreviation: str) -> Team | None:
        return self.first_where(func.upper(Team.abbreviation) == abbreviation.strip().upper())

    def by_conference(self, conference: str) -> list[Team]:
        return self.all_where(Team.conference == conference.upper())
