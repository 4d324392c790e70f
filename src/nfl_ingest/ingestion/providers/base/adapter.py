from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

from nfl_ingest.db.models.core.game import Game
from nfl_ingest.ingestion.reconcile import ReconciliationStore, UpsertResult

from .client import FetchClient
from .correlation import CorrelationCache, CorrelationKey
from .types import (
    Decoded,
    FetchOutcome,
    GameRecord,
    PlayerRecord,
    RunOutcome,
    StatLineRecord,
    TeamRecord,
)

logger = structlog.get_logger(__name__)

R = TypeVar("R")

REGULAR_SEASON_WEEKS = 18


@dataclass(frozen=True)
class AdapterContext:
    """Everything one provider binding shares between its four adapters."""

    provider_key: str
    client: FetchClient
    store: ReconciliationStore
    cache: CorrelationCache


class CapabilityAdapter:
    """
    Shared plumbing for capability adapters.

    Orchestration depends on the capability methods only, never on a
    provider's HTTP endpoints or payload shapes.
    """

    def __init__(self, ctx: AdapterContext) -> None:
        self.ctx = ctx

    @property
    def provider_key(self) -> str:
        return self.ctx.provider_key

    @property
    def client(self) -> FetchClient:
        return self.ctx.client

    @property
    def store(self) -> ReconciliationStore:
        return self.ctx.store

    @property
    def cache(self) -> CorrelationCache:
        return self.ctx.cache

    def _fetch_failed(self, what: str, outcome: FetchOutcome) -> RunOutcome:
        assert outcome.failure is not None
        message = f"Failed to fetch {what} from {self.provider_key}"
        return RunOutcome.failure(message, [outcome.failure.describe()], failed=1)

    def _reconcile(
        self,
        what: str,
        decoded: Decoded[R],
        upsert: Callable[[R], UpsertResult],
    ) -> RunOutcome:
        """Upsert every decoded record, then commit the batch once.

        Each upsert runs in its own savepoint; a database error on one record
        rolls back that record only and is reported as a skip.
        """

        processed = 0
        errors: list[str] = list(decoded.skipped)

        for record in decoded.records:
            result = self._upsert_one(what, upsert, record)
            if result.stored:
                processed += 1
            else:
                errors.append(result.reason)

        self.store.commit()

        failed = len(errors)
        if failed:
            logger.info(
                "records skipped",
                provider=self.provider_key,
                what=what,
                skipped=failed,
                first=errors[0],
            )
        logger.info("reconciled", provider=self.provider_key, what=what, processed=processed)

        if processed == 0 and failed > 0:
            return RunOutcome.failure(
                f"No {what} reconciled from {self.provider_key}", errors, failed=failed
            )
        return RunOutcome.success(
            processed, f"Reconciled {processed} {what}", failed=failed, errors=errors
        )

    def _upsert_one(
        self, what: str, upsert: Callable[[R], UpsertResult], record: R
    ) -> UpsertResult:
        try:
            with self.store.session.begin_nested():
                return upsert(record)
        except SQLAlchemyError as e:
            logger.warning(
                "record upsert failed", provider=self.provider_key, what=what, error=str(e)
            )
            # DBAPI errors carry the driver message on .orig.
            detail = getattr(e, "orig", None) or e
            return UpsertResult.skipped(f"{what}: {type(e).__name__}: {detail}")


class TeamAdapter(CapabilityAdapter, ABC):
    @abstractmethod
    def fetch_teams(self) -> FetchOutcome[Decoded[TeamRecord]]: ...

    def ingest_teams(self, team_key: str | None = None) -> RunOutcome:
        outcome = self.fetch_teams()
        if not outcome.ok:
            return self._fetch_failed("teams", outcome)

        decoded = outcome.unwrap()
        if team_key:
            wanted = team_key.strip().upper()
            decoded = Decoded(
                records=[r for r in decoded.records if r.abbreviation.upper() == wanted],
                skipped=decoded.skipped,
            )
            if not decoded.records:
                return RunOutcome.failure(f"Team '{wanted}' not found at {self.provider_key}")

        return self._reconcile("teams", decoded, self.store.upsert_team)


class PlayerAdapter(CapabilityAdapter, ABC):
    @abstractmethod
    def fetch_roster(self, team_abbreviation: str) -> FetchOutcome[Decoded[PlayerRecord]]: ...

    def ingest_players(self, team_key: str | None = None) -> RunOutcome:
        if team_key:
            return self._ingest_roster(team_key.strip().upper())

        teams = [t.abbreviation for t in self.store.teams()]
        if not teams:
            return RunOutcome.failure("No teams found. Scrape teams first.")

        children = [self._ingest_roster(abbr) for abbr in teams]
        return RunOutcome.aggregate(f"Players for {len(teams)} teams", children)

    def _ingest_roster(self, team_abbreviation: str) -> RunOutcome:
        outcome = self.fetch_roster(team_abbreviation)
        if not outcome.ok:
            return self._fetch_failed(f"{team_abbreviation} roster", outcome)
        return self._reconcile(
            f"{team_abbreviation} players", outcome.unwrap(), self.store.upsert_player
        )


class GameAdapter(CapabilityAdapter, ABC):
    @abstractmethod
    def fetch_week(self, season: int, week: int) -> FetchOutcome[Decoded[GameRecord]]: ...

    def ingest_games(self, season: int, week: int | None = None) -> RunOutcome:
        if week is not None:
            return self._ingest_week(season, week)

        children = [self._ingest_week(season, w) for w in range(1, REGULAR_SEASON_WEEKS + 1)]
        return RunOutcome.aggregate(f"Games for season {season}", children)

    def _ingest_week(self, season: int, week: int) -> RunOutcome:
        outcome = self.fetch_week(season, week)
        if not outcome.ok:
            return self._fetch_failed(f"season {season} week {week} games", outcome)
        return self._reconcile(
            f"season {season} week {week} games", outcome.unwrap(), self._upsert_game
        )

    def _upsert_game(self, record: GameRecord) -> UpsertResult:
        result = self.store.upsert_game(record)
        if result.stored and record.native_id:
            self.cache.put(
                CorrelationKey(record.season, record.week, record.home_abbreviation),
                record.native_id,
            )
        return result


class StatsAdapter(CapabilityAdapter, ABC):
    """Weekly player stat lines.

    Stat lines attach to stored games, so a week with no stored games is a
    prerequisite failure rather than an empty success.
    """

    def ingest_stats(self, season: int, week: int) -> RunOutcome:
        games = self.store.games_for_week(season, week)
        if not games:
            return RunOutcome.failure(
                f"No games found for season {season} week {week}. Scrape games first."
            )
        return self.collect_stats(season, week, games)

    @abstractmethod
    def collect_stats(self, season: int, week: int, games: Sequence[Game]) -> RunOutcome: ...


class WeeklyStatsAdapter(StatsAdapter, ABC):
    """Providers that publish one payload of stat lines per week."""

    @abstractmethod
    def fetch_week_stats(
        self, season: int, week: int
    ) -> FetchOutcome[Decoded[StatLineRecord]]: ...

    def collect_stats(self, season: int, week: int, games: Sequence[Game]) -> RunOutcome:
        outcome = self.fetch_week_stats(season, week)
        if not outcome.ok:
            return self._fetch_failed(f"season {season} week {week} stats", outcome)
        return self._reconcile(
            f"season {season} week {week} stat lines",
            outcome.unwrap(),
            self.store.upsert_stat_line,
        )


class PerGameStatsAdapter(StatsAdapter, ABC):
    """Providers whose stats endpoint is keyed by their own event id.

    The event id comes from the correlation cache filled by the games fetch
    of the same binding; a miss skips that game and the rest continue.
    """

    @abstractmethod
    def fetch_game_stats(
        self, native_id: str, *, season: int, week: int, home: str, away: str
    ) -> FetchOutcome[Decoded[StatLineRecord]]: ...

    def native_id_for(self, key: CorrelationKey, game: Game) -> str | None:
        return self.cache.get(key)

    def collect_stats(self, season: int, week: int, games: Sequence[Game]) -> RunOutcome:
        children: list[RunOutcome] = []
        for game in games:
            key = CorrelationKey(season, week, game.home_team.abbreviation)
            native_id = self.native_id_for(key, game)
            if native_id is None:
                message = CorrelationCache.miss_message(key)
                logger.warning("correlation miss", provider=self.provider_key, key=str(key))
                children.append(RunOutcome.failure(message, failed=1))
                continue

            outcome = self.fetch_game_stats(
                native_id,
                season=season,
                week=week,
                home=game.home_team.abbreviation,
                away=game.away_team.abbreviation,
            )
            if not outcome.ok:
                children.append(self._fetch_failed(f"game {native_id} box score", outcome))
                continue
            children.append(
                self._reconcile(
                    f"game {native_id} stat lines", outcome.unwrap(), self.store.upsert_stat_line
                )
            )

        return RunOutcome.aggregate(f"Stats for season {season} week {week}", children)
