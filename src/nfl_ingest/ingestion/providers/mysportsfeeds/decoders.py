"""MySportsFeeds v2.1 NFL payloads -> normalized records."""

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

PROVIDER = "mysportsfeeds"


def _full_name(person: dict[str, Any]) -> str:
    return f"{text(person.get('firstName'))} {text(person.get('lastName'))}".strip()


def _abbr(team: Any) -> str:
    return text(as_dict(team).get("abbreviation")).upper()


def decode_teams(payload: Any) -> Decoded[TeamRecord]:
    records: list[TeamRecord] = []
    skipped: list[str] = []
    for wrapper in require_list(payload, "teams", provider=PROVIDER):
        team = as_dict(as_dict(wrapper).get("team"))
        abbr = _abbr(team)
        name = text(team.get("name"))
        if not abbr or not name:
            skipped.append(f"mysportsfeeds team id={team.get('id')!r} has no abbreviation or name")
            continue
        records.append(
            TeamRecord(
                abbreviation=abbr,
                name=name,
                city=text(team.get("city")),
                conference=text(team.get("conference")),
                division=text(team.get("division")),
            )
        )
    return Decoded(records=records, skipped=skipped)


def decode_players(payload: Any, *, team_abbreviation: str) -> Decoded[PlayerRecord]:
    records: list[PlayerRecord] = []
    skipped: list[str] = []
    for wrapper in require_list(payload, "players", provider=PROVIDER):
        player = as_dict(as_dict(wrapper).get("player"))
        name = _full_name(player)
        if not name:
            skipped.append(f"mysportsfeeds player id={player.get('id')!r} has no name")
            continue
        records.append(
            PlayerRecord(
                name=name,
                team_abbreviation=_abbr(player.get("currentTeam")) or team_abbreviation,
                position=text(player.get("position")),
                jersey_number=parse_int(player.get("jerseyNumber")),
                height=normalize_height(player.get("height")),
                weight=parse_int(player.get("weight")),
                college=text(player.get("college")) or None,
            )
        )
    return Decoded(records=records, skipped=skipped)


def decode_games(payload: Any, *, season: int, week: int) -> Decoded[GameRecord]:
    records: list[GameRecord] = []
    skipped: list[str] = []
    for wrapper in require_list(payload, "games", provider=PROVIDER):
        wrapper = as_dict(wrapper)
        schedule = as_dict(wrapper.get("schedule"))
        home = _abbr(schedule.get("homeTeam"))
        away = _abbr(schedule.get("awayTeam"))
        if not home or not away:
            skipped.append(f"mysportsfeeds game id={schedule.get('id')!r} is missing a team")
            continue

        # Score sits beside the schedule in v2.1 and inside it in older feeds.
        score = as_dict(wrapper.get("score")) or as_dict(schedule.get("score"))
        records.append(
            GameRecord(
                season=season,
                week=parse_int(schedule.get("week")) or week,
                home_abbreviation=home,
                away_abbreviation=away,
                game_date=parse_datetime(schedule.get("startTime")),
                home_score=parse_int(score.get("homeScoreTotal")),
                away_score=parse_int(score.get("awayScoreTotal")),
                native_id=text(schedule.get("id")) or None,
            )
        )
    return Decoded(records=records, skipped=skipped)


def decode_gamelogs(payload: Any, *, season: int, week: int) -> Decoded[StatLineRecord]:
    records: list[StatLineRecord] = []
    skipped: list[str] = []
    for log in require_list(payload, "gamelogs", provider=PROVIDER):
        log = as_dict(log)
        name = _full_name(as_dict(log.get("player")))
        if not name:
            skipped.append("mysportsfeeds gamelog has no player name")
            continue

        game = as_dict(log.get("game"))
        stats = as_dict(log.get("stats"))
        passing = as_dict(stats.get("passing"))
        rushing = as_dict(stats.get("rushing"))
        receiving = as_dict(stats.get("receiving"))

        line = StatLineRecord(
            player_name=name,
            team_abbreviation=_abbr(log.get("team")),
            season=season,
            week=parse_int(game.get("week")) or week,
            home_abbreviation=_abbr(game.get("homeTeam")) or None,
            away_abbreviation=_abbr(game.get("awayTeam")) or None,
            pass_attempts=int_or_zero(passing.get("passAttempts")),
            pass_completions=int_or_zero(passing.get("passCompletions")),
            pass_yards=int_or_zero(passing.get("passYards")),
            pass_touchdowns=int_or_zero(passing.get("passTD")),
            interceptions=int_or_zero(passing.get("passInt")),
            rush_attempts=int_or_zero(rushing.get("rushAttempts")),
            rush_yards=int_or_zero(rushing.get("rushYards")),
            rush_touchdowns=int_or_zero(rushing.get("rushTD")),
            receptions=int_or_zero(receiving.get("receptions")),
            receiving_yards=int_or_zero(receiving.get("recYards")),
            receiving_touchdowns=int_or_zero(receiving.get("recTD")),
        )
        if line.has_stats():
            records.append(line)
    return Decoded(records=records, skipped=skipped)
