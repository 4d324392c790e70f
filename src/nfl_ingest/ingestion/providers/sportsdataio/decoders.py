"""SportsData.io v3 NFL payloads -> normalized records.

Every endpoint answers with a flat JSON array of PascalCase objects.
"""

from __future__ import annotations

from typing import Any

from nfl_ingest.ingestion.parsing import (
    as_dict,
    int_or_zero,
    normalize_height,
    parse_datetime,
    parse_int,
    require_list,
    text,
)
from nfl_ingest.ingestion.providers.base.types import (
    Decoded,
    GameRecord,
    PlayerRecord,
    StatLineRecord,
    TeamRecord,
)

PROVIDER = "sportsdataio"


def decode_teams(payload: Any) -> Decoded[TeamRecord]:
    records: list[TeamRecord] = []
    skipped: list[str] = []
    for item in require_list(payload, provider=PROVIDER):
        item = as_dict(item)
        key = text(item.get("Key")).upper()
        name = text(item.get("FullName")) or text(item.get("Name"))
        if not key or not name:
            skipped.append(f"sportsdataio team {item.get('TeamID')!r} has no key or name")
            continue
        records.append(
            TeamRecord(
                abbreviation=key,
                name=name,
                city=text(item.get("City")),
                conference=text(item.get("Conference")),
                division=text(item.get("Division")),
            )
        )
    return Decoded(records=records, skipped=skipped)


def decode_players(payload: Any, *, team_abbreviation: str) -> Decoded[PlayerRecord]:
    records: list[PlayerRecord] = []
    skipped: list[str] = []
    for item in require_list(payload, provider=PROVIDER):
        item = as_dict(item)
        name = text(item.get("Name"))
        if not name:
            skipped.append(f"sportsdataio player {item.get('PlayerID')!r} has no name")
            continue
        records.append(
            PlayerRecord(
                name=name,
                team_abbreviation=text(item.get("Team")).upper() or team_abbreviation,
                position=text(item.get("Position")),
                jersey_number=parse_int(item.get("Number")),
                height=normalize_height(item.get("Height")),
                weight=parse_int(item.get("Weight")),
                college=text(item.get("College")) or None,
            )
        )
    return Decoded(records=records, skipped=skipped)


def decode_scores(payload: Any, *, season: int, week: int) -> Decoded[GameRecord]:
    records: list[GameRecord] = []
    skipped: list[str] = []
    for item in require_list(payload, provider=PROVIDER):
        item = as_dict(item)
        home = text(item.get("HomeTeam")).upper()
        away = text(item.get("AwayTeam")).upper()
        if not home or not away:
            skipped.append(f"sportsdataio game {item.get('GameKey')!r} is missing a team")
            continue
        records.append(
            GameRecord(
                season=season,
                week=week,
                home_abbreviation=home,
                away_abbreviation=away,
                game_date=parse_datetime(item.get("Date")),
                home_score=parse_int(item.get("HomeScore")),
                away_score=parse_int(item.get("AwayScore")),
                native_id=text(item.get("GameKey")) or None,
            )
        )
    return Decoded(records=records, skipped=skipped)


def decode_player_game_stats(payload: Any, *, season: int, week: int) -> Decoded[StatLineRecord]:
    """Weekly stat lines; the game is resolved later from the player's team and week."""

    records: list[StatLineRecord] = []
    skipped: list[str] = []
    for item in require_list(payload, provider=PROVIDER):
        item = as_dict(item)
        name = text(item.get("Name"))
        if not name:
            skipped.append(f"sportsdataio stat line {item.get('PlayerID')!r} has no name")
            continue
        line = StatLineRecord(
            player_name=name,
            team_abbreviation=text(item.get("Team")).upper(),
            season=season,
            week=week,
            pass_attempts=int_or_zero(item.get("PassingAttempts")),
            pass_completions=int_or_zero(item.get("PassingCompletions")),
            pass_yards=int_or_zero(item.get("PassingYards")),
            pass_touchdowns=int_or_zero(item.get("PassingTouchdowns")),
            interceptions=int_or_zero(item.get("PassingInterceptions")),
            rush_attempts=int_or_zero(item.get("RushingAttempts")),
            rush_yards=int_or_zero(item.get("RushingYards")),
            rush_touchdowns=int_or_zero(item.get("RushingTouchdowns")),
            receptions=int_or_zero(item.get("Receptions")),
            receiving_yards=int_or_zero(item.get("ReceivingYards")),
            receiving_touchdowns=int_or_zero(item.get("ReceivingTouchdowns")),
        )
        if line.has_stats():
            records.append(line)
    return Decoded(records=records, skipped=skipped)
