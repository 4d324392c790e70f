"""Pro-Football-Reference HTML pages -> normalized records.

PFR publishes stat tables rather than an API. Tables are located by their
``id`` and cells by their ``data-stat`` attribute. Some tables ship inside
HTML comments and are revealed client-side, so a table missing from the
parsed document is looked up inside comments as well.
"""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from bs4 import BeautifulSoup, Comment, Tag

from nfl_ingest.ingestion.divisions import division_for
from nfl_ingest.ingestion.parsing import int_or_zero, normalize_height, parse_datetime, parse_int
from nfl_ingest.ingestion.providers.base.errors import ProviderDecodeError
from nfl_ingest.ingestion.providers.base.types import (
    Decoded,
    GameRecord,
    PlayerRecord,
    StatLineRecord,
    TeamRecord,
)
from nfl_ingest.ingestion.providers.profootballreference.mappings import to_abbreviation, to_pfr

PROVIDER = "profootballreference"

# PFR prints dates and kickoff times in Eastern time.
ET = ZoneInfo("America/New_York")

# Repeated header rows inside long tables.
_HEADER_ROW_CLASSES = frozenset({"thead", "over_header"})


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _table(soup: BeautifulSoup, table_id: str) -> Tag:
    table = soup.find("table", id=table_id)
    if isinstance(table, Tag):
        return table

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        if table_id not in comment:
            continue
        table = _soup(str(comment)).find("table", id=table_id)
        if isinstance(table, Tag):
            return table

    raise ProviderDecodeError(f"{PROVIDER}: page has no '{table_id}' table")


def _rows(table: Tag) -> list[Tag]:
    body = table.find("tbody")
    rows = (body if isinstance(body, Tag) else table).find_all("tr")
    return [r for r in rows if not _HEADER_ROW_CLASSES.intersection(r.get("class") or [])]


def _cell(row: Tag, *stats: str) -> Tag | None:
    for stat in stats:
        cell = row.find(["th", "td"], attrs={"data-stat": stat})
        if isinstance(cell, Tag):
            return cell
    return None


def _cell_text(row: Tag, *stats: str) -> str:
    cell = _cell(row, *stats)
    return cell.get_text(" ", strip=True) if cell is not None else ""


def _link_parts(cell: Tag | None) -> list[str]:
    if cell is None:
        return []
    link = cell.find("a", href=True)
    if not isinstance(link, Tag):
        return []
    return [part for part in str(link["href"]).split("/") if part]


def _team_code(cell: Tag | None) -> str:
    """Franchise code from a team link: "/teams/kan/" or "/teams/kan/2024.htm"."""
    parts = _link_parts(cell)
    if len(parts) >= 2 and parts[0] == "teams":
        return parts[1]
    return ""


def boxscore_id(kickoff_utc: datetime, home_abbreviation: str) -> str:
    """Box score pages are named by the Eastern kickoff date and home franchise."""
    local = kickoff_utc.replace(tzinfo=UTC).astimezone(ET)
    return f"{local:%Y%m%d}0{to_pfr(home_abbreviation)}"


def decode_teams(html: str) -> Decoded[TeamRecord]:
    records: list[TeamRecord] = []
    skipped: list[str] = []
    seen: set[str] = set()

    for row in _rows(_table(_soup(html), "teams_active")):
        cell = _cell(row, "team_name")
        code = _team_code(cell)
        if cell is None or not code:
            # Franchise-history rows under each team carry no team link.
            continue

        abbr = to_abbreviation(code)
        name = cell.get_text(" ", strip=True)
        if not name:
            skipped.append(f"profootballreference team '{code}' has no name")
            continue
        if abbr in seen:
            continue
        seen.add(abbr)

        city, _, _ = name.rpartition(" ")
        conference, division = division_for(abbr)
        records.append(
            TeamRecord(
                abbreviation=abbr,
                name=name,
                city=city,
                conference=conference,
                division=division,
            )
        )
    return Decoded(records=records, skipped=skipped)


def decode_roster(html: str, *, team_abbreviation: str) -> Decoded[PlayerRecord]:
    records: list[PlayerRecord] = []
    skipped: list[str] = []

    for index, row in enumerate(_rows(_table(_soup(html), "roster"))):
        name = _cell_text(row, "player")
        if not name:
            skipped.append(
                f"profootballreference {team_abbreviation} roster row {index} has no player"
            )
            continue
        records.append(
            PlayerRecord(
                name=name,
                team_abbreviation=team_abbreviation,
                position=_cell_text(row, "pos"),
                jersey_number=parse_int(_cell_text(row, "uniform_number", "jersey_number")),
                height=normalize_height(_cell_text(row, "height")),
                weight=parse_int(_cell_text(row, "weight")),
                college=_cell_text(row, "college_id", "college") or None,
            )
        )
    return Decoded(records=records, skipped=skipped)


def _kickoff(row: Tag) -> datetime | None:
    """Kickoff as naive UTC. Rows without a time are taken as midnight Eastern."""
    cell = _cell(row, "game_date")
    if cell is None:
        return None

    day = None
    # "csk" holds the sortable ISO date; the visible text may be "September 5".
    for candidate in (cell.get("csk"), cell.get_text(strip=True)):
        day = parse_datetime(candidate)
        if day is not None:
            break
    if day is None:
        return None

    local = day.replace(tzinfo=ET)
    try:
        clock = datetime.strptime(_cell_text(row, "gametime").replace(" ", ""), "%I:%M%p")
    except ValueError:
        pass
    else:
        local = local.replace(hour=clock.hour, minute=clock.minute)
    return local.astimezone(UTC).replace(tzinfo=None)


def decode_schedule(html: str, *, season: int, week: int) -> Decoded[GameRecord]:
    """One week of games from the season schedule page."""
    records: list[GameRecord] = []
    skipped: list[str] = []

    for row in _rows(_table(_soup(html), "games")):
        # Playoff rows carry labels like "WildCard" and never match.
        if parse_int(_cell_text(row, "week_num")) != week:
            continue

        winner = _team_code(_cell(row, "winner"))
        loser = _team_code(_cell(row, "loser"))
        if not winner or not loser:
            skipped.append(f"profootballreference week {week} game row has no teams")
            continue

        # The schedule lists winner first; "@" marks the winner as the visitor.
        home, away = winner, loser
        home_score = parse_int(_cell_text(row, "pts_win"))
        away_score = parse_int(_cell_text(row, "pts_lose"))
        if _cell_text(row, "game_location") == "@":
            home, away = away, home
            home_score, away_score = away_score, home_score

        home_abbr = to_abbreviation(home)
        game_date = _kickoff(row)

        native_id = None
        box = _link_parts(_cell(row, "boxscore_word"))
        if len(box) == 2 and box[0] == "boxscores":
            native_id = box[1].removesuffix(".htm")
        elif game_date is not None:
            native_id = boxscore_id(game_date, home_abbr)

        records.append(
            GameRecord(
                season=season,
                week=week,
                home_abbreviation=home_abbr,
                away_abbreviation=to_abbreviation(away),
                game_date=game_date,
                home_score=home_score,
                away_score=away_score,
                native_id=native_id,
            )
        )
    return Decoded(records=records, skipped=skipped)


def decode_boxscore(
    html: str, *, season: int, week: int, home: str, away: str
) -> Decoded[StatLineRecord]:
    records: list[StatLineRecord] = []
    skipped: list[str] = []

    for row in _rows(_table(_soup(html), "player_offense")):
        name = _cell_text(row, "player")
        team = _cell_text(row, "team")
        if not name or not team:
            skipped.append(f"profootballreference box score row '{name}' has no player or team")
            continue

        line = StatLineRecord(
            player_name=name,
            team_abbreviation=to_abbreviation(team),
            season=season,
            week=week,
            home_abbreviation=home,
            away_abbreviation=away,
            pass_completions=int_or_zero(_cell_text(row, "pass_cmp")),
            pass_attempts=int_or_zero(_cell_text(row, "pass_att")),
            pass_yards=int_or_zero(_cell_text(row, "pass_yds")),
            pass_touchdowns=int_or_zero(_cell_text(row, "pass_td")),
            interceptions=int_or_zero(_cell_text(row, "pass_int")),
            rush_attempts=int_or_zero(_cell_text(row, "rush_att")),
            rush_yards=int_or_zero(_cell_text(row, "rush_yds")),
            rush_touchdowns=int_or_zero(_cell_text(row, "rush_td")),
            receptions=int_or_zero(_cell_text(row, "rec")),
            receiving_yards=int_or_zero(_cell_text(row, "rec_yds")),
            receiving_touchdowns=int_or_zero(_cell_text(row, "rec_td")),
        )
        if line.has_stats():
            records.append(line)
    return Decoded(records=records, skipped=skipped)
