from __future__ import annotations

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nfl_ingest.db.base import Base, TimestampMixin


class Team(Base, TimestampMixin):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Natural key: canonical NFL abbreviation (e.g. "KC").
    abbreviation: Mapped[str] = mapped_column(String(8), nullable=False)

    name: Mapped[str] = mapped_column(String, nullable=False)
    city: Mapped[str] = mapped_column(String, nullable=False, default="", server_default="")
    conference: Mapped[str] = mapped_column(String(8), nullable=False, default="", server_default="")
    division: Mapped[str] = mapped_column(String(16), nullable=False, default="", server_default="")

    players: Mapped[list[Player]] = relationship(back_populates="team")

    home_games: Mapped[list[Game]] = relationship(
        back_populates="home_team",
        foreign_keys="Game.home_team_id",
    )
    away_games: Mapped[list[Game]] = relationship(
        back_populates="away_team",
        foreign_keys="Game.away_team_id",
    )

    __table_args__ = (
        UniqueConstraint("abbreviation", name="uq_teams_abbreviation"),
        Index("ix_teams_conference", "conference"),
    )


from nfl_ingest.db.models.core.game import Game  # noqa: E402
from nfl_ingest.db.models.core.player import Player  # noqa: E402
