from __future__ import annotations

import os
from logging.config import fileConfig
from typing import Any

from alembic import context
from dotenv import find_dotenv, load_dotenv
from sqlalchemy import create_engine, pool

import nfl_ingest.db.models  # noqa: F401
from nfl_ingest.db.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _database_url() -> str:
    """
    Target database, first match wins:

    1. ``alembic -x url=...`` on the command line
    2. ``DATABASE_URL`` from the environment or the nearest ``.env``
    3. ``sqlalchemy.url`` in alembic.ini
    """
    url = context.get_x_argument(as_dictionary=True).get("url")
    if url:
        return url

    load_dotenv(find_dotenv(usecwd=True), override=False)
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    url = config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("No database URL; pass -x url=... or set DATABASE_URL")
    return url


def _configure(url: str, **kwargs: Any) -> None:
    # SQLite cannot ALTER most constraints in place; batch mode recreates tables.
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        render_as_batch=url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline(url: str) -> None:
    _configure(url, url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online(url: str) -> None:
    engine = create_engine(url, poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _configure(url, connection=connection)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline(_database_url())
else:
    run_migrations_online(_database_url())
