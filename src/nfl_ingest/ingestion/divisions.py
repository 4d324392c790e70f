"""The NFL conference/division table, keyed by standard abbreviation.

Used by providers whose team listings omit conference and division.
"""

from __future__ import annotations

_DIVISIONS: dict[tuple[str, str], tuple[str, ...]] = {
    ("AFC", "East"): ("BUF", "MIA", "NE", "NYJ"),
    ("AFC", "North"): ("BAL", "CIN", "CLE", "PIT"),
    ("AFC", "South"): ("HOU", "IND", "JAX", "TEN"),
    ("AFC", "West"): ("DEN", "KC", "LV", "LAC"),
    ("NFC", "East"): ("DAL", "NYG", "PHI", "WAS"),
    ("NFC", "North"): ("CHI", "DET", "GB", "MIN"),
    ("NFC", "South"): ("ATL", "CAR", "NO", "TB"),
    ("NFC", "West"): ("ARI", "LAR", "SF", "SEA"),
}

DIVISION_BY_ABBREVIATION: dict[str, tuple[str, str]] = {
    abbr: conf_div for conf_div, teams in _DIVISIONS.items() for abbr in teams
}


def division_for(abbreviation: str) -> tuple[str, str]:
    """(conference, division) for a team; unknown teams get empty strings."""
    return DIVISION_BY_ABBREVIATION.get(abbreviation.strip().upper(), ("", ""))
