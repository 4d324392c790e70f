from __future__ import annotations

from datetime import datetime

import pytest

from nfl_ingest.ingestion.parsing import normalize_height, parse_datetime, parse_int, require_list
from nfl_ingest.ingestion.providers.base.errors import ProviderDecodeError
from nfl_ingest.ingestion.providers.espn.decoders import decode_boxscore, decode_scoreboard
from nfl_ingest.ingestion.providers.mysportsfeeds.decoders import decode_games


@pytest.mark.parametrize(
    "raw, expected",
    [(74, "6-2"), ("74", "6-2"), ("6-2", "6-2"), ("6' 2\"", "6-2"), (None, None), ("", None), (0, None)],
)
def test_normalize_height(raw, expected) -> None:
    assert normalize_height(raw) == expected


def test_parse_int_is_lenient() -> None:
    assert parse_int("15") == 15
    assert parse_int(291.0) == 291
    assert parse_int("12.0") == 12
    assert parse_int("--") is None
    assert parse_int(True) is None


@pytest.mark.parametrize("raw", ["1e400", "-1e400", "nan", "inf", float("inf"), float("nan")])
def test_parse_int_rejects_non_finite_numbers(raw) -> None:
    assert parse_int(raw) is None


def test_parse_datetime_normalizes_to_naive_utc() -> None:
    assert parse_datetime("2024-09-08T17:00Z") == datetime(2024, 9, 8, 17, 0)
    assert parse_datetime("2024-09-08T13:00:00-04:00") == datetime(2024, 9, 8, 17, 0)
    assert parse_datetime("2024-09-08T17:00:00") == datetime(2024, 9, 8, 17, 0)
    assert parse_datetime("TBD") is None
    assert parse_datetime(None) is None


def test_require_list_rejects_wrong_shapes() -> None:
    assert require_list({"events": []}, "events", provider="espn") == []
    with pytest.raises(ProviderDecodeError):
        require_list([], "events", provider="espn")
    with pytest.raises(ProviderDecodeError):
        require_list({"Message": "denied"}, provider="sportsdataio")


def test_scoreboard_skips_events_without_both_sides() -> None:
    payload = {
        "events": [
            {"id": "1", "competitions": []},
            {"id": "2", "competitions": [{"competitors": [{"homeAway": "home", "team": {"id": "12"}}]}]},
        ]
    }
    decoded = decode_scoreboard(payload, season=2024, week=1)

    assert decoded.records == []
    assert len(decoded.skipped) == 2


def test_boxscore_drops_lines_without_offensive_stats() -> None:
    payload = {
        "boxscore": {
            "players": [
                {
                    "team": {"id": "2"},
                    "statistics": [
                        {
                            "name": "passing",
                            "keys": ["C/ATT", "YDS", "TD", "INT"],
                            "athletes": [
                                {"athlete": {"displayName": "Josh Allen"}, "stats": ["18/23", "232", "2", "0"]},
                                {"athlete": {"displayName": "Sam Martin"}, "stats": ["0/0", "0", "0", "0"]},
                            ],
                        },
                        {"name": "kicking", "keys": ["FG"], "athletes": [{"athlete": {"displayName": "Tyler Bass"}, "stats": ["2/2"]}]},
                    ],
                }
            ]
        }
    }
    decoded = decode_boxscore(payload, season=2024, week=1, home="BUF", away="ARI")

    assert [r.player_name for r in decoded.records] == ["Josh Allen"]
    line = decoded.records[0]
    assert line.team_abbreviation == "BUF"
    assert (line.pass_completions, line.pass_attempts, line.pass_yards) == (18, 23, 232)
    assert (line.home_abbreviation, line.away_abbreviation) == ("BUF", "ARI")


def test_boxscore_without_boxscore_is_malformed() -> None:
    with pytest.raises(ProviderDecodeError):
        decode_boxscore({"header": {}}, season=2024, week=1, home="KC", away="BUF")


def test_mysportsfeeds_score_inside_schedule() -> None:
    payload = {
        "games": [
            {
                "schedule": {
                    "id": 9,
                    "homeTeam": {"abbreviation": "kc"},
                    "awayTeam": {"abbreviation": "buf"},
                    "score": {"homeScoreTotal": 27, "awayScoreTotal": 20},
                }
            }
        ]
    }
    [game] = decode_games(payload, season=2024, week=3).records

    assert (game.home_abbreviation, game.away_abbreviation) == ("KC", "BUF")
    assert (game.week, game.home_score, game.away_score) == (3, 27, 20)
    assert game.native_id == "9"
