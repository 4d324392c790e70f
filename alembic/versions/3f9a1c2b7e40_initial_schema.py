"""Initial schema: teams, players, games, player game stats

Revision ID: 3f9a1c2b7e40
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def _stat_column(name: str) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=False, server_default=sa.text("0"))


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("abbreviation", sa.String(length=8), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("city", sa.String(), server_default="", nullable=False),
        sa.Column("conference", sa.String(length=8), server_default="", nullable=False),
        sa.Column("division", sa.String(length=16), server_default="", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("abbreviation", name="uq_teams_abbreviation"),
    )
    op.create_index("ix_teams_conference", "teams", ["conference"], unique=False)

    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("position", sa.String(length=8), server_default="", nullable=False),
        sa.Column("jersey_number", sa.Integer(), nullable=True),
        sa.Column("height", sa.String(length=8), nullable=True),
        sa.Column("weight", sa.Integer(), nullable=True),
        sa.Column("college", sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "team_id", name="uq_players_name_team"),
    )
    op.create_index("ix_players_name", "players", ["name"], unique=False)

    op.create_table(
        "games",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("season", sa.Integer(), nullable=False),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("home_team_id", sa.Integer(), nullable=False),
        sa.Column("away_team_id", sa.Integer(), nullable=False),
        sa.Column("game_date", sa.DateTime(), nullable=True),
        sa.Column("home_score", sa.Integer(), nullable=True),
        sa.Column("away_score", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["home_team_id"], ["teams.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["away_team_id"], ["teams.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "season", "week", "home_team_id", "away_team_id", name="uq_games_natural_key"
        ),
    )
    op.create_index("ix_games_season_week", "games", ["season", "week"], unique=False)
    op.create_index("ix_games_home_team", "games", ["home_team_id"], unique=False)
    op.create_index("ix_games_away_team", "games", ["away_team_id"], unique=False)

    op.create_table(
        "player_game_stats",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        _stat_column("pass_attempts"),
        _stat_column("pass_completions"),
        _stat_column("pass_yards"),
        _stat_column("pass_touchdowns"),
        _stat_column("interceptions"),
        _stat_column("rush_attempts"),
        _stat_column("rush_yards"),
        _stat_column("rush_touchdowns"),
        _stat_column("receptions"),
        _stat_column("receiving_yards"),
        _stat_column("receiving_touchdowns"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("player_id", "game_id", name="uq_player_game_stats_natural_key"),
    )


def downgrade() -> None:
    op.drop_table("player_game_stats")
    op.drop_index("ix_games_away_team", table_name="games")
    op.drop_index("ix_games_home_team", table_name="games")
    op.drop_index("ix_games_season_week", table_name="games")
    op.drop_table("games")
    op.drop_index("ix_players_name", table_name="players")
    op.drop_table("players")
    op.drop_index("ix_teams_conference", table_name="teams")
    op.drop_table("teams")
