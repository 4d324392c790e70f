from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

import typer
from sqlalchemy.orm import Session

from nfl_ingest.core.config import Settings
from nfl_ingest.db import Base, DatabaseConfig, create_db_engine, create_session_factory
from nfl_ingest.ingestion.providers.base.types import RunOutcome

FIRST_SEASON = 1920
MAX_WEEK = 22


def load_settings() -> Settings:
    # Read per invocation so env overrides apply to each command.
    return Settings()


@contextmanager
def session_scope(settings: Settings) -> Iterator[Session]:
    """
    Context-managed DB session for CLI commands.
    Creates missing tables, ensures proper close and rolls back on exception.
    """
    engine = create_db_engine(
        DatabaseConfig(database_url=settings.database_url, echo=settings.db_echo)
    )
    Base.metadata.create_all(engine)
    SessionLocal = create_session_factory(engine)
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        engine.dispose()


def fail(message: str) -> typer.Exit:
    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def validate_season(season: int | None) -> None:
    if season is None:
        return
    last = datetime.now(tz=UTC).year + 1
    if season < FIRST_SEASON or season > last:
        raise fail(f"Invalid season {season}. Must be between {FIRST_SEASON} and {last}")


def validate_week(week: int | None) -> None:
    if week is None:
        return
    if week < 1 or week > MAX_WEEK:
        raise fail(f"Invalid week {week}. Must be between 1 and {MAX_WEEK}")


def report(label: str, outcome: RunOutcome) -> None:
    """Print a run summary and exit 0 on success, 1 otherwise."""
    status = "OK" if outcome.succeeded else "FAILED"
    color = typer.colors.GREEN if outcome.succeeded else typer.colors.RED
    typer.secho(f"{label}: {status}", fg=color)
    typer.echo(
        " ".join(
            [
                f"processed={outcome.records_processed}",
                f"failed={outcome.records_failed}",
                f"message={outcome.message!r}",
            ]
        )
    )
    if outcome.errors:
        typer.echo("Errors:")
        for e in outcome.errors:
            typer.echo(f"  - {e}")
    raise typer.Exit(code=0 if outcome.succeeded else 1)
