from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nfl_ingest.db.base import Base, TimestampMixin


class Game(Base, TimestampMixin):
    __tablename__ = "games"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Natural key: (season, week, home_team_id, away_team_id)
    season: Mapped[int] = mapped_column(Integer, nullable=False)
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    home_team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False
    )
    away_team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False
    )

    game_date: Mapped[datetime | None] = mapped_column(nullable=True)
    home_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    away_score: Mapped[int | None] = mapped_column(Integer, nullable=True)

    home_team: Mapped[Team] = relationship(back_populates="home_games", foreign_keys=[home_team_id])
    away_team: Mapped[Team] = relationship(back_populates="away_games", foreign_keys=[away_team_id])

    player_stats: Mapped[list[PlayerGameStats]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint(
            "season", "week", "home_team_id", "away_team_id", name="uq_games_natural_key"
        ),
        Index("ix_games_season_week", "season", "week"),
        Index("ix_games_home_team", "home_team_id"),
        Index("ix_games_away_team", "away_team_id"),
    )


from nfl_ingest.db.models.core.player_game_stats import PlayerGameStats  # noqa: E402
from nfl_ingest.db.models.core.team import Team  # noqa: E402
