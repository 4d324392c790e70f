"""Idempotent natural-key upserts for decoded provider records.

Rows are looked up by natural key; a hit overwrites the mutable fields
(latest wins), a miss inserts. A record whose parent row is not stored yet
is skipped with a diagnostic instead of failing the batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import structlog
from sqlalchemy.orm import Session

from nfl_ingest.db.models.core.game import Game
from nfl_ingest.db.models.core.player import Player
from nfl_ingest.db.models.core.player_game_stats import PlayerGameStats
from nfl_ingest.db.models.core.team import Team
from nfl_ingest.db.repos.core.game_repo import GameRepository
from nfl_ingest.db.repos.core.player_repo import PlayerRepository
from nfl_ingest.db.repos.core.stats_repo import PlayerGameStatsRepository
from nfl_ingest.db.repos.core.team_repo import TeamRepository
from nfl_ingest.ingestion.providers.base.types import (
    GameRecord,
    PlayerRecord,
    StatLineRecord,
    TeamRecord,
)

logger = structlog.get_logger(__name__)


class UpsertStatus(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class UpsertResult:
    status: UpsertStatus
    reason: str = ""
    row: Any = None
    # False when an existing row already held identical values.
    changed: bool = False

    @property
    def stored(self) -> bool:
        return self.status != UpsertStatus.SKIPPED

    @classmethod
    def created(cls, row: Any) -> UpsertResult:
        return cls(status=UpsertStatus.CREATED, row=row, changed=True)

    @classmethod
    def updated(cls, row: Any, *, changed: bool) -> UpsertResult:
        return cls(status=UpsertStatus.UPDATED, row=row, changed=changed)

    @classmethod
    def skipped(cls, reason: str) -> UpsertResult:
        return cls(status=UpsertStatus.SKIPPED, reason=reason)


class ReconciliationStore:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.team_repo = TeamRepository(session)
        self.player_repo = PlayerRepository(session)
        self.game_repo = GameRepository(session)
        self.stats_repo = PlayerGameStatsRepository(session)

    # -----------------------------
    # Queries
    # -----------------------------

    def teams(self) -> list[Team]:
        return sorted(self.team_repo.list(), key=lambda t: t.abbreviation)

    def team_by_abbreviation(self, abbreviation: str) -> Team | None:
        if not abbreviation:
            return None
        return self.team_repo.find_by_natural_key(abbreviation)

    def games_for_week(self, season: int, week: int) -> list[Game]:
        return self.game_repo.for_week(season, week)

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    # -----------------------------
    # Upserts
    # -----------------------------

    def upsert_team(self, record: TeamRecord) -> UpsertResult:
        abbreviation = record.abbreviation.strip().upper()
        if not abbreviation:
            return UpsertResult.skipped(f"team '{record.name}' has no abbreviation")

        fields = {
            "name": record.name,
            "city": record.city,
            "conference": record.conference,
            "division": record.division,
        }
        existing = self.team_repo.find_by_natural_key(abbreviation)
        if existing is None:
            team = self.team_repo.insert(Team(abbreviation=abbreviation, **fields))
            return UpsertResult.created(team)

        changed = self.team_repo.update(existing, fields)
        return UpsertResult.updated(existing, changed=changed)

    def upsert_player(self, record: PlayerRecord) -> UpsertResult:
        if not record.name:
            return UpsertResult.skipped("player has no name")

        team = self.team_by_abbreviation(record.team_abbreviation)
        if team is None:
            return UpsertResult.skipped(
                f"player '{record.name}': team '{record.team_abbreviation}' not found"
            )

        fields = {
            "position": record.position,
            "jersey_number": record.jersey_number,
            "height": record.height,
            "weight": record.weight,
            "college": record.college,
        }
        existing = self.player_repo.find_by_natural_key(record.name, team.id)
        if existing is None:
            player = self.player_repo.insert(Player(name=record.name, team_id=team.id, **fields))
            return UpsertResult.created(player)

        changed = self.player_repo.update(existing, fields)
        return UpsertResult.updated(existing, changed=changed)

    def upsert_game(self, record: GameRecord) -> UpsertResult:
        home = self.team_by_abbreviation(record.home_abbreviation)
        away = self.team_by_abbreviation(record.away_abbreviation)
        if home is None or away is None:
            missing = record.home_abbreviation if home is None else record.away_abbreviation
            return UpsertResult.skipped(
                f"game {record.away_abbreviation}@{record.home_abbreviation} "
                f"season {record.season} week {record.week}: team '{missing}' not found"
            )

        fields = {
            "game_date": record.game_date,
            "home_score": record.home_score,
            "away_score": record.away_score,
        }
        existing = self.game_repo.find_by_natural_key(
            season=record.season,
            week=record.week,
            home_team_id=home.id,
            away_team_id=away.id,
        )
        if existing is None:
            game = self.game_repo.insert(
                Game(
                    season=record.season,
                    week=record.week,
                    home_team_id=home.id,
                    away_team_id=away.id,
                    **fields,
                )
            )
            return UpsertResult.created(game)

        changed = self.game_repo.update(existing, fields)
        return UpsertResult.updated(existing, changed=changed)

    def upsert_stat_line(self, record: StatLineRecord) -> UpsertResult:
        team = self.team_by_abbreviation(record.team_abbreviation)
        player = self._resolve_player(record.player_name, team)
        if player is None:
            return UpsertResult.skipped(
                f"stat line: player '{record.player_name}' ({record.team_abbreviation}) not found"
            )

        game = self._resolve_game(record, team)
        if game is None:
            return UpsertResult.skipped(
                f"stat line for '{record.player_name}': no game for "
                f"{record.team_abbreviation or '?'} in season {record.season} week {record.week}"
            )

        fields = record.stat_fields()
        existing = self.stats_repo.find_by_natural_key(player_id=player.id, game_id=game.id)
        if existing is None:
            line = self.stats_repo.insert(
                PlayerGameStats(player_id=player.id, game_id=game.id, **fields)
            )
            return UpsertResult.created(line)

        changed = self.stats_repo.update(existing, fields)
        return UpsertResult.updated(existing, changed=changed)

    def _resolve_player(self, name: str, team: Team | None) -> Player | None:
        if not name:
            return None
        if team is not None:
            player = self.player_repo.find_by_natural_key(name, team.id)
            if player is not None:
                return player
        # Rosters and box scores disagree on team after trades; fall back to name.
        return self.player_repo.first_where(Player.name == name)

    def _resolve_game(self, record: StatLineRecord, team: Team | None) -> Game | None:
        if record.home_abbreviation and record.away_abbreviation:
            home = self.team_by_abbreviation(record.home_abbreviation)
            away = self.team_by_abbreviation(record.away_abbreviation)
            if home is not None and away is not None:
                return self.game_repo.find_by_natural_key(
                    season=record.season,
                    week=record.week,
                    home_team_id=home.id,
                    away_team_id=away.id,
                )
            return None

        if team is None:
            return None
        return self.game_repo.for_team_in_week(
            season=record.season, week=record.week, team_id=team.id
        )
