from __future__ import annotations

import argparse
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config

ROOT = Path(__file__).resolve().parents[1]


def _alembic_config(*x_args: str) -> Config:
    # No ini file: keeps alembic from reconfiguring logging for the test run.
    cfg = Config()
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.cmd_opts = argparse.Namespace(x=list(x_args))
    return cfg


def test_upgrade_head_targets_the_url_given_on_the_command_line(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    elsewhere = tmp_path / "from_env.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{elsewhere}")
    target = tmp_path / "migrated.db"

    command.upgrade(_alembic_config(f"url=sqlite+pysqlite:///{target}"), "head")

    engine = sa.create_engine(f"sqlite+pysqlite:///{target}")
    try:
        tables = set(sa.inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {"teams", "players", "games", "player_game_stats", "alembic_version"} <= tables
    assert not elsewhere.exists()


def test_upgrade_head_falls_back_to_database_url(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "from_env.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{target}")

    command.upgrade(_alembic_config(), "head")

    engine = sa.create_engine(f"sqlite+pysqlite:///{target}")
    try:
        assert "teams" in sa.inspect(engine).get_table_names()
    finally:
        engine.dispose()
