from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nfl_ingest.db.base import Base, TimestampMixin


class Player(Base, TimestampMixin):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Natural key: (name, team_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    team_id: Mapped[int | None] = mapped_column(
        ForeignKey("teams.id", ondelete="SET NULL"), nullable=True
    )

    position: Mapped[str] = mapped_column(String(8), nullable=False, default="", server_default="")
    jersey_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[str | None] = mapped_column(String(8), nullable=True)  # "6-2"
    weight: Mapped[int | None] = mapped_column(Integer, nullable=True)
    college: Mapped[str | None] = mapped_column(String, nullable=True)

    team: Mapped[Team | None] = relationship(back_populates="players")

    game_stats: Mapped[list[PlayerGameStats]] = relationship(
        back_populates="player",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("name", "team_id", name="uq_players_name_team"),
        Index("ix_players_name", "name"),
    )


from nfl_ingest.db.models.core.player_game_stats import PlayerGameStats  # noqa: E402
from nfl_ingest.db.models.core.team import Team  # noqa: E402
