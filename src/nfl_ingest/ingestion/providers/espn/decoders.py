"""ESPN site API payloads -> normalized records.

Pure functions. Shape problems at the top level raise ProviderDecodeError;
individual unusable items are skipped with a reason.
"""

from __future__ import annotations

from typing import Any

from nfl_ingest.ingestion.divisions import division_for
from nfl_ingest.ingestion.parsing import (
    as_dict,
    as_list,
    normalize_height,
    parse_datetime,
    parse_int,
    require_list,
    text,
)
from nfl_ingest.ingestion.providers.base.errors import ProviderDecodeError
from nfl_ingest.ingestion.providers.base.types import (
    Decoded,
    GameRecord,
    PlayerRecord,
    StatLineRecord,
    TeamRecord,
)
from nfl_ingest.ingestion.providers.espn.mappings import to_abbreviation

PROVIDER = "espn"

# Box score columns, by category. ESPN has used both the short labels and the
# long camelCase keys for the same column.
_PASSING_KEYS = {
    "C/ATT": "c/att",
    "COMPLETIONS/PASSINGATTEMPTS": "c/att",
    "YDS": "pass_yards",
    "PASSINGYARDS": "pass_yards",
    "TD": "pass_touchdowns",
    "PASSINGTOUCHDOWNS": "pass_touchdowns",
    "INT": "interceptions",
    "INTERCEPTIONS": "interceptions",
}
_RUSHING_KEYS = {
    "CAR": "rush_attempts",
    "RUSHINGATTEMPTS": "rush_attempts",
    "YDS": "rush_yards",
    "RUSHINGYARDS": "rush_yards",
    "TD": "rush_touchdowns",
    "RUSHINGTOUCHDOWNS": "rush_touchdowns",
}
_RECEIVING_KEYS = {
    "REC": "receptions",
    "RECEPTIONS": "receptions",
    "YDS": "receiving_yards",
    "RECEIVINGYARDS": "receiving_yards",
    "TD": "receiving_touchdowns",
    "RECEIVINGTOUCHDOWNS": "receiving_touchdowns",
}
_CATEGORIES = {
    "passing": _PASSING_KEYS,
    "rushing": _RUSHING_KEYS,
    "receiving": _RECEIVING_KEYS,
}


def decode_teams(payload: Any) -> Decoded[TeamRecord]:
    sports = require_list(payload, "sports", provider=PROVIDER)

    records: list[TeamRecord] = []
    skipped: list[str] = []
    for sport in sports:
        for league in as_list(as_dict(sport).get("leagues")):
            for wrapper in as_list(as_dict(league).get("teams")):
                team = as_dict(as_dict(wrapper).get("team"))
                name = text(team.get("displayName"))
                if not name:
                    skipped.append(f"espn team id={team.get('id')!r} has no display name")
                    continue

                abbr = to_abbreviation(text(team.get("id")), text(team.get("abbreviation")))
                conference, division = division_for(abbr)
                records.append(
                    TeamRecord(
                        abbreviation=abbr,
                        name=name,
                        city=text(team.get("location")),
                        conference=conference,
                        division=division,
                    )
                )

    return Decoded(records=records, skipped=skipped)


def decode_roster(payload: Any, *, team_abbreviation: str) -> Decoded[PlayerRecord]:
    groups = require_list(payload, "athletes", provider=PROVIDER)

    records: list[PlayerRecord] = []
    skipped: list[str] = []
    for group in groups:
        for athlete in as_list(as_dict(group).get("items")):
            athlete = as_dict(athlete)
            name = text(athlete.get("displayName"))
            if not name:
                skipped.append(f"espn athlete id={athlete.get('id')!r} has no name")
                continue

            records.append(
                PlayerRecord(
                    name=name,
                    team_abbreviation=team_abbreviation,
                    position=text(as_dict(athlete.get("position")).get("abbreviation")),
                    jersey_number=parse_int(athlete.get("jersey")),
                    height=normalize_height(athlete.get("height")),
                    weight=parse_int(athlete.get("weight")),
                    college=text(as_dict(athlete.get("college")).get("name")) or None,
                )
            )

    return Decoded(records=records, skipped=skipped)


def decode_scoreboard(payload: Any, *, season: int, week: int) -> Decoded[GameRecord]:
    events = require_list(payload, "events", provider=PROVIDER)

    records: list[GameRecord] = []
    skipped: list[str] = []
    for event in events:
        event = as_dict(event)
        event_id = text(event.get("id"))
        competitions = as_list(event.get("competitions"))
        if not competitions:
            skipped.append(f"espn event {event_id or '?'} has no competition")
            continue

        competitors = as_list(as_dict(competitions[0]).get("competitors"))
        home = _competitor(competitors, "home")
        away = _competitor(competitors, "away")
        if home is None or away is None:
            skipped.append(f"espn event {event_id or '?'} is missing a home or away side")
            continue

        home_team = as_dict(home.get("team"))
        away_team = as_dict(away.get("team"))
        records.append(
            GameRecord(
                season=season,
                week=week,
                home_abbreviation=to_abbreviation(
                    text(home_team.get("id")), text(home_team.get("abbreviation"))
                ),
                away_abbreviation=to_abbreviation(
                    text(away_team.get("id")), text(away_team.get("abbreviation"))
                ),
                game_date=parse_datetime(event.get("date")),
                home_score=parse_int(home.get("score")),
                away_score=parse_int(away.get("score")),
                native_id=event_id or None,
            )
        )

    return Decoded(records=records, skipped=skipped)


def _competitor(competitors: list[Any], side: str) -> dict[str, Any] | None:
    for c in competitors:
        c = as_dict(c)
        if text(c.get("homeAway")).lower() == side:
            return c
    return None


def decode_boxscore(
    payload: Any, *, season: int, week: int, home: str, away: str
) -> Decoded[StatLineRecord]:
    """One game summary -> one stat line per player with any offensive stats."""

    if not isinstance(payload, dict) or not isinstance(payload.get("boxscore"), dict):
        raise ProviderDecodeError(
            "espn: summary has no boxscore", context={"season": season, "week": week}
        )
    teams = as_list(payload["boxscore"].get("players"))

    records: list[StatLineRecord] = []
    for team_block in teams:
        team_block = as_dict(team_block)
        team = as_dict(team_block.get("team"))
        team_abbr = to_abbreviation(text(team.get("id")), text(team.get("abbreviation")))

        # Merge the per-category rows into one line per player name.
        lines: dict[str, dict[str, int]] = {}
        for category in as_list(team_block.get("statistics")):
            category = as_dict(category)
            columns = _CATEGORIES.get(text(category.get("name")).lower())
            if columns is None:
                continue
            keys = [text(k).upper() for k in as_list(category.get("keys"))]
            for row in as_list(category.get("athletes")):
                row = as_dict(row)
                name = text(as_dict(row.get("athlete")).get("displayName"))
                if not name:
                    continue
                _apply_row(lines.setdefault(name, {}), columns, keys, as_list(row.get("stats")))

        for name, fields in lines.items():
            line = StatLineRecord(
                player_name=name,
                team_abbreviation=team_abbr,
                season=season,
                week=week,
                home_abbreviation=home,
                away_abbreviation=away,
                **fields,
            )
            if line.has_stats():
                records.append(line)

    return Decoded(records=records)


def _apply_row(
    fields: dict[str, int], columns: dict[str, str], keys: list[str], values: list[Any]
) -> None:
    for key, raw in zip(keys, values):
        column = columns.get(key)
        if column is None:
            continue
        if column == "c/att":
            completions, _, attempts = text(raw).partition("/")
            fields["pass_completions"] = parse_int(completions) or 0
            fields["pass_attempts"] = parse_int(attempts) or 0
            continue
        value = parse_int(raw)
        if value is not None:
            fields[column] = value
