from __future__ import annotations

import httpx
from sqlalchemy.orm import Session

from nfl_ingest.db.models.core.game import Game
from nfl_ingest.ingestion.pipeline import run_full_pipeline

TEAMS = [
    {"Key": "KC", "FullName": "Kansas City Chiefs", "City": "Kansas City", "Conference": "AFC", "Division": "West"},
    {"Key": "BUF", "FullName": "Buffalo Bills", "City": "Buffalo", "Conference": "AFC", "Division": "East"},
]


def test_pipeline_stops_when_teams_fail(bind_provider, router) -> None:
    router.add("/scores/json/Teams", httpx.Response(401, json={"message": "bad key"}))
    binding = bind_provider("sportsdataio")

    outcome = run_full_pipeline(binding, 2024)

    assert not outcome.succeeded
    assert outcome.message == "Pipeline stopped: teams ingest failed"
    assert router.calls("/scores/json/Players/KC") == []
    assert not any("ScoresByWeek" in r.url.path for r in router.requests)


def test_pipeline_runs_every_week(bind_provider, router, session: Session) -> None:
    router.add("/scores/json/Teams", TEAMS)
    router.add("/scores/json/Players/KC", [{"Name": "Patrick Mahomes", "Team": "KC", "Position": "QB"}])
    router.add("/scores/json/Players/BUF", [{"Name": "Josh Allen", "Team": "BUF", "Position": "QB"}])

    def scores(request: httpx.Request) -> httpx.Response:
        week = int(request.url.path.rsplit("/", 1)[-1])
        home, away = ("KC", "BUF") if week % 2 else ("BUF", "KC")
        return httpx.Response(200, json=[{"GameKey": str(week), "HomeTeam": home, "AwayTeam": away}])

    for week in range(1, 19):
        router.add(f"/scores/json/ScoresByWeek/2024/{week}", scores)
    binding = bind_provider("sportsdataio")

    outcome = run_full_pipeline(binding, 2024)

    assert outcome.succeeded
    assert outcome.records_processed == 2 + 2 + 18
    assert outcome.message.startswith("Pipeline complete")
    assert session.query(Game).count() == 18


def test_pipeline_reports_failure_of_a_later_step(bind_provider, router, session: Session) -> None:
    router.add("/scores/json/Teams", TEAMS)
    router.add("/scores/json/Players/KC", [])
    router.add("/scores/json/Players/BUF", [])
    # No schedule routes: every week answers 404.
    binding = bind_provider("sportsdataio")

    outcome = run_full_pipeline(binding, 2024)

    assert not outcome.succeeded
    assert outcome.records_processed == 2
    assert session.query(Game).count() == 0
