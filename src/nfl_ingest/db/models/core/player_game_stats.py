from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nfl_ingest.db.base import Base, TimestampMixin


class PlayerGameStats(Base, TimestampMixin):
    __tablename__ = "player_game_stats"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Natural key: (player_id, game_id)
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), nullable=False
    )
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"), nullable=False)

    # Passing
    pass_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pass_completions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pass_yards: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pass_touchdowns: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    interceptions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Rushing
    rush_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rush_yards: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rush_touchdowns: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Receiving
    receptions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    receiving_yards: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    receiving_touchdowns: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    player: Mapped[Player] = relationship(back_populates="game_stats")
    game: Mapped[Game] = relationship(back_populates="player_stats")

    __table_args__ = (UniqueConstraint("player_id", "game_id", name="uq_player_game_stats_natural_key"),)


from nfl_ingest.db.models.core.game import Game  # noqa: E402
from nfl_ingest.db.models.core.player import Player  # noqa: E402
