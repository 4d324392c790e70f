from __future__ import annotations

from datetime import datetime

import httpx
import pytest
from sqlalchemy.orm import Session

from nfl_ingest.db.models.core.game import Game
from nfl_ingest.db.models.core.player import Player
from nfl_ingest.db.models.core.player_game_stats import PlayerGameStats
from nfl_ingest.db.models.core.team import Team
from nfl_ingest.ingestion.providers.base.errors import ProviderDecodeError
from nfl_ingest.ingestion.providers.profootballreference.adapters import current_season
from nfl_ingest.ingestion.providers.profootballreference.decoders import (
    boxscore_id,
    decode_roster,
    decode_schedule,
    decode_teams,
)
from nfl_ingest.ingestion.providers.profootballreference.mappings import to_abbreviation, to_pfr

TEAMS_HTML = """
<html><body>
<table id="teams_active">
  <thead><tr><th data-stat="team_name">Tm</th></tr></thead>
  <tbody>
    <tr><th data-stat="team_name"><a href="/teams/kan/">Kansas City Chiefs</a></th></tr>
    <tr class="partial_table"><th data-stat="team_name">Dallas Texans</th></tr>
    <tr class="thead"><th data-stat="team_name">Tm</th></tr>
    <tr><th data-stat="team_name"><a href="/teams/buf/">Buffalo Bills</a></th></tr>
  </tbody>
</table>
</body></html>
"""

# PFR ships roster tables inside HTML comments.
ROSTER_KC_HTML = """
<div id="all_roster"><!--
<table id="roster"><tbody>
  <tr>
    <td data-stat="uniform_number">15</td>
    <td data-stat="player"><a href="/players/M/MahoPa00.htm">Patrick Mahomes</a></td>
    <td data-stat="pos">QB</td>
    <td data-stat="height">6-2</td>
    <td data-stat="weight">225</td>
    <td data-stat="college_id"><a href="/schools/texastech/">Texas Tech</a></td>
  </tr>
</tbody></table>
--></div>
"""

ROSTER_BUF_HTML = """
<table id="roster"><tbody>
  <tr>
    <th data-stat="uniform_number">17</th>
    <td data-stat="player">Josh Allen</td>
    <td data-stat="pos">QB</td>
  </tr>
  <tr><td data-stat="player"></td></tr>
</tbody></table>
"""

GAMES_HTML = """
<table id="games"><tbody>
  <tr>
    <th data-stat="week_num">1</th>
    <td data-stat="game_date" csk="2024-09-05">September 5</td>
    <td data-stat="gametime">8:20PM</td>
    <td data-stat="winner"><a href="/teams/kan/2024.htm">Kansas City Chiefs</a></td>
    <td data-stat="game_location"></td>
    <td data-stat="loser"><a href="/teams/buf/2024.htm">Buffalo Bills</a></td>
    <td data-stat="boxscore_word"><a href="/boxscores/202409050kan.htm">boxscore</a></td>
    <td data-stat="pts_win">27</td>
    <td data-stat="pts_lose">20</td>
  </tr>
  <tr class="thead"><th data-stat="week_num">Week</th></tr>
  <tr>
    <th data-stat="week_num">2</th>
    <td data-stat="game_date">2024-09-15</td>
    <td data-stat="winner"><a href="/teams/buf/2024.htm">Buffalo Bills</a></td>
    <td data-stat="game_location">@</td>
    <td data-stat="loser"><a href="/teams/kan/2024.htm">Kansas City Chiefs</a></td>
    <td data-stat="pts_win">24</td>
    <td data-stat="pts_lose">17</td>
  </tr>
  <tr>
    <th data-stat="week_num">WildCard</th>
    <td data-stat="winner"><a href="/teams/kan/2024.htm">Kansas City Chiefs</a></td>
    <td data-stat="loser"><a href="/teams/buf/2024.htm">Buffalo Bills</a></td>
  </tr>
</tbody></table>
"""

BOXSCORE_HTML = """
<table id="player_offense"><tbody>
  <tr>
    <th data-stat="player"><a href="/players/M/MahoPa00.htm">Patrick Mahomes</a></th>
    <td data-stat="team">KAN</td>
    <td data-stat="pass_cmp">21</td><td data-stat="pass_att">30</td>
    <td data-stat="pass_yds">291</td><td data-stat="pass_td">2</td><td data-stat="pass_int">0</td>
    <td data-stat="rush_att">4</td><td data-stat="rush_yds">18</td><td data-stat="rush_td">0</td>
    <td data-stat="rec">0</td><td data-stat="rec_yds">0</td><td data-stat="rec_td">0</td>
  </tr>
  <tr class="thead"><th data-stat="player">Player</th></tr>
  <tr>
    <th data-stat="player">Josh Allen</th>
    <td data-stat="team">BUF</td>
    <td data-stat="pass_cmp">18</td><td data-stat="pass_att">23</td>
    <td data-stat="pass_yds">232</td><td data-stat="pass_td">2</td><td data-stat="pass_int">0</td>
  </tr>
  <tr>
    <th data-stat="player">Matt Araiza</th>
    <td data-stat="team">KAN</td>
    <td data-stat="pass_att">0</td>
  </tr>
</tbody></table>
"""


def _html(body: str) -> httpx.Response:
    return httpx.Response(200, html=body)


def _seed_routes(router) -> None:
    season = current_season()
    router.add("/teams/", _html(TEAMS_HTML))
    router.add(f"/teams/kan/{season}_roster.htm", _html(ROSTER_KC_HTML))
    router.add(f"/teams/buf/{season}_roster.htm", _html(ROSTER_BUF_HTML))
    router.add("/years/2024/games.htm", _html(GAMES_HTML))
    router.add("/boxscores/202409050kan.htm", _html(BOXSCORE_HTML))


# -----------------------------
# Decoders
# -----------------------------


def test_franchise_codes_map_both_ways() -> None:
    assert to_abbreviation("kan") == "KC"
    assert to_abbreviation("GNB") == "GB"
    assert to_abbreviation("htx") == "HOU"
    assert to_abbreviation("bal") == "BAL"
    assert to_pfr("LV") == "rai"
    assert to_pfr("buf") == "buf"


def test_teams_skip_history_rows_and_fill_divisions() -> None:
    decoded = decode_teams(TEAMS_HTML)

    assert [(t.abbreviation, t.city) for t in decoded.records] == [
        ("KC", "Kansas City"),
        ("BUF", "Buffalo"),
    ]
    kc = decoded.records[0]
    assert (kc.conference, kc.division) == ("AFC", "West")


def test_roster_found_inside_html_comment() -> None:
    [player] = decode_roster(ROSTER_KC_HTML, team_abbreviation="KC").records

    assert player.name == "Patrick Mahomes"
    assert (player.jersey_number, player.position) == (15, "QB")
    assert (player.height, player.weight, player.college) == ("6-2", 225, "Texas Tech")


def test_roster_rows_without_a_player_are_skipped() -> None:
    decoded = decode_roster(ROSTER_BUF_HTML, team_abbreviation="BUF")

    assert [p.jersey_number for p in decoded.records] == [17]
    assert len(decoded.skipped) == 1


def test_schedule_swaps_sides_when_the_winner_was_away() -> None:
    [week1] = decode_schedule(GAMES_HTML, season=2024, week=1).records
    [week2] = decode_schedule(GAMES_HTML, season=2024, week=2).records

    assert (week1.home_abbreviation, week1.away_abbreviation) == ("KC", "BUF")
    assert (week1.home_score, week1.away_score) == (27, 20)
    # 8:20PM Eastern on Sept 5 is past midnight UTC.
    assert week1.game_date == datetime(2024, 9, 6, 0, 20)
    assert week1.native_id == "202409050kan"

    assert (week2.home_abbreviation, week2.away_abbreviation) == ("KC", "BUF")
    assert (week2.home_score, week2.away_score) == (17, 24)
    assert week2.game_date == datetime(2024, 9, 15, 4)
    # No box score link yet; the page name is derived.
    assert week2.native_id == "202409150kan"


def test_schedule_ignores_other_weeks_and_playoffs() -> None:
    assert decode_schedule(GAMES_HTML, season=2024, week=18).records == []


def test_missing_table_is_malformed() -> None:
    with pytest.raises(ProviderDecodeError, match="teams_active"):
        decode_teams("<html><body>Too many requests</body></html>")


def test_boxscore_id_uses_eastern_date_and_home_franchise() -> None:
    assert boxscore_id(datetime(2024, 9, 8, 17), "TEN") == "202409080oti"
    # Thursday night kickoff, stored as UTC on the following day.
    assert boxscore_id(datetime(2024, 9, 6, 0, 20), "KC") == "202409050kan"


# -----------------------------
# Ingest
# -----------------------------


def test_full_flow_reads_box_score_pages(bind_provider, router, session: Session) -> None:
    _seed_routes(router)
    binding = bind_provider("profootballreference")

    assert binding.teams.ingest_teams().records_processed == 2
    assert binding.players.ingest_players().records_processed == 2
    games = binding.games.ingest_games(2024, 1)
    stats = binding.stats.ingest_stats(2024, 1)

    assert games.records_processed == 1
    assert stats.succeeded and stats.records_processed == 2

    kc = session.query(Team).filter_by(abbreviation="KC").one()
    assert (kc.name, kc.conference) == ("Kansas City Chiefs", "AFC")
    assert session.query(Player).filter_by(name="Patrick Mahomes").one().college == "Texas Tech"

    game = session.query(Game).one()
    assert (game.home_score, game.away_score) == (27, 20)

    mahomes_line = (
        session.query(PlayerGameStats)
        .join(Player)
        .filter(Player.name == "Patrick Mahomes")
        .one()
    )
    assert (mahomes_line.pass_completions, mahomes_line.pass_yards, mahomes_line.rush_yards) == (
        21,
        291,
        18,
    )


def test_season_schedule_is_fetched_once(bind_provider, router, session: Session) -> None:
    _seed_routes(router)
    binding = bind_provider("profootballreference")
    binding.teams.ingest_teams()

    outcome = binding.games.ingest_games(2024)

    assert outcome.succeeded
    assert outcome.records_processed == 2
    assert len(router.calls("/games.htm")) == 1
    assert session.query(Game).count() == 2


def test_stats_derive_box_score_page_without_cached_ids(
    bind_provider, router, session: Session
) -> None:
    _seed_routes(router)
    first = bind_provider("profootballreference")
    first.teams.ingest_teams()
    first.players.ingest_players()
    first.games.ingest_games(2024, 1)

    # A fresh binding has an empty correlation cache.
    outcome = bind_provider("profootballreference").stats.ingest_stats(2024, 1)

    assert outcome.succeeded and outcome.records_processed == 2
    assert len(router.calls("/boxscores/202409050kan.htm")) == 1


def test_block_page_is_reported_as_malformed(bind_provider, router, session: Session) -> None:
    router.add("/teams/", _html("<html><body>Rate limited. Try again later.</body></html>"))

    outcome = bind_provider("profootballreference").teams.ingest_teams()

    assert not outcome.succeeded
    assert outcome.errors[0].startswith("malformed:")
    assert len(router.calls("/teams/")) == 1
    assert session.query(Team).count() == 0
