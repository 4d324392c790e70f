from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Generic, TypeVar

from .errors import (
    CircuitOpenError,
    ProviderDecodeError,
    ProviderError,
    ProviderStatusError,
    ProviderTimeout,
)

Json = dict[str, Any]
T = TypeVar("T")

MAX_RUN_ERRORS = 25


# -----------------------------
# Fetch results
# -----------------------------


class FailureKind(StrEnum):
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    STATUS = "status"
    MALFORMED = "malformed"
    CIRCUIT_OPEN = "circuit_open"


@dataclass(frozen=True)
class FetchFailure:
    kind: FailureKind
    message: str
    status_code: int | None = None
    attempts: int = 1

    @classmethod
    def from_error(cls, exc: ProviderError, *, attempts: int = 1) -> FetchFailure:
        if isinstance(exc, CircuitOpenError):
            kind = FailureKind.CIRCUIT_OPEN
        elif isinstance(exc, ProviderDecodeError):
            kind = FailureKind.MALFORMED
        elif isinstance(exc, ProviderTimeout):
            kind = FailureKind.TIMEOUT
        elif isinstance(exc, ProviderStatusError):
            kind = FailureKind.STATUS
        else:
            kind = FailureKind.TRANSPORT
        return cls(
            kind=kind,
            message=str(exc),
            status_code=getattr(exc, "status_code", None),
            attempts=attempts,
        )

    def describe(self) -> str:
        text = f"{self.kind.value}: {self.message}"
        if self.attempts > 1:
            text += f" (after {self.attempts} attempts)"
        return text


@dataclass(frozen=True)
class FetchOutcome(Generic[T]):
    """Either a decoded payload or a classified failure. Never raised."""

    value: T | None = None
    failure: FetchFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> FetchOutcome[T]:
        return cls(value=value)

    @classmethod
    def failed(cls, failure: FetchFailure) -> FetchOutcome[T]:
        return cls(failure=failure)

    def unwrap(self) -> T:
        if self.failure is not None:
            raise ValueError(f"FetchOutcome has no value: {self.failure.describe()}")
        return self.value  # type: ignore[return-value]


# -----------------------------
# Normalized records (decoder output)
# -----------------------------


@dataclass(frozen=True)
class TeamRecord:
    abbreviation: str
    name: str
    city: str = ""
    conference: str = ""
    division: str = ""


@dataclass(frozen=True)
class PlayerRecord:
    name: str
    team_abbreviation: str
    position: str = ""
    jersey_number: int | None = None
    height: str | None = None
    weight: int | None = None
    college: str | None = None


@dataclass(frozen=True)
class GameRecord:
    season: int
    week: int
    home_abbreviation: str
    away_abbreviation: str
    game_date: datetime | None = None
    home_score: int | None = None
    away_score: int | None = None
    # Provider event id needed by a later dependent fetch (never persisted).
    native_id: str | None = None


@dataclass(frozen=True)
class StatLineRecord:
    player_name: str
    team_abbreviation: str
    season: int
    week: int
    # When both are known the game is matched by natural key; otherwise by team+week.
    home_abbreviation: str | None = None
    away_abbreviation: str | None = None

    pass_attempts: int = 0
    pass_completions: int = 0
    pass_yards: int = 0
    pass_touchdowns: int = 0
    interceptions: int = 0
    rush_attempts: int = 0
    rush_yards: int = 0
    rush_touchdowns: int = 0
    receptions: int = 0
    receiving_yards: int = 0
    receiving_touchdowns: int = 0

    def has_stats(self) -> bool:
        return self.pass_attempts > 0 or self.rush_attempts > 0 or self.receptions > 0

    def stat_fields(self) -> dict[str, int]:
        return {
            "pass_attempts": self.pass_attempts,
            "pass_completions": self.pass_completions,
            "pass_yards": self.pass_yards,
            "pass_touchdowns": self.pass_touchdowns,
            "interceptions": self.interceptions,
            "rush_attempts": self.rush_attempts,
            "rush_yards": self.rush_yards,
            "rush_touchdowns": self.rush_touchdowns,
            "receptions": self.receptions,
            "receiving_yards": self.receiving_yards,
            "receiving_touchdowns": self.receiving_touchdowns,
        }


@dataclass(frozen=True)
class Decoded(Generic[T]):
    """Decoder output: mapped records plus per-item skip reasons."""

    records: list[T] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


# -----------------------------
# Run outcome
# -----------------------------


def _bounded(errors: Iterable[str]) -> list[str]:
    out: list[str] = []
    for e in errors:
        if len(out) >= MAX_RUN_ERRORS:
            break
        out.append(e)
    return out


@dataclass(frozen=True)
class RunOutcome:
    succeeded: bool
    records_processed: int = 0
    records_failed: int = 0
    message: str = ""
    errors: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.errors) > MAX_RUN_ERRORS:
            object.__setattr__(self, "errors", _bounded(self.errors))

    @classmethod
    def success(
        cls,
        count: int,
        message: str,
        *,
        failed: int = 0,
        errors: Iterable[str] = (),
    ) -> RunOutcome:
        return cls(
            succeeded=True,
            records_processed=count,
            records_failed=failed,
            message=message,
            errors=_bounded(errors),
        )

    @classmethod
    def failure(cls, message: str, errors: Iterable[str] = (), *, failed: int = 0) -> RunOutcome:
        return cls(
            succeeded=False,
            records_processed=0,
            records_failed=failed,
            message=message,
            errors=_bounded(errors),
        )

    @classmethod
    def aggregate(cls, message: str, children: Sequence[RunOutcome]) -> RunOutcome:
        """Combine fan-out results.

        A fan-out succeeds when every child succeeded, or when at least one
        record made it through despite some children failing.
        """
        processed = sum(c.records_processed for c in children)
        failed = sum(c.records_failed for c in children)
        errors: list[str] = []
        for c in children:
            if not c.succeeded and c.message:
                errors.append(c.message)
            errors.extend(c.errors)
        all_ok = all(c.succeeded for c in children)
        return cls(
            succeeded=all_ok or processed > 0,
            records_processed=processed,
            records_failed=failed,
            message=message,
            errors=_bounded(errors),
        )
