"""ESPN team ids.

ESPN addresses teams by its own numeric ids; rosters are fetched by that id
while everything stored locally is keyed by the standard abbreviation.
"""

from __future__ import annotations

ESPN_ID_TO_ABBREVIATION: dict[str, str] = {
    "1": "ATL",
    "2": "BUF",
    "3": "CHI",
    "4": "CIN",
    "5": "CLE",
    "6": "DAL",
    "7": "DEN",
    "8": "DET",
    "9": "GB",
    "10": "TEN",
    "11": "IND",
    "12": "KC",
    "13": "LV",
    "14": "LAR",
    "15": "MIA",
    "16": "MIN",
    "17": "NE",
    "18": "NO",
    "19": "NYG",
    "20": "NYJ",
    "21": "PHI",
    "22": "ARI",
    "23": "PIT",
    "24": "LAC",
    "25": "SF",
    "26": "SEA",
    "27": "TB",
    "28": "WAS",
    "29": "CAR",
    "30": "JAX",
    "33": "BAL",
    "34": "HOU",
}

ABBREVIATION_TO_ESPN_ID: dict[str, str] = {v: k for k, v in ESPN_ID_TO_ABBREVIATION.items()}


def to_abbreviation(espn_id: str, fallback: str = "") -> str:
    """Standard abbreviation for an ESPN id; unknown ids fall back to ESPN's own code."""
    abbr = ESPN_ID_TO_ABBREVIATION.get(str(espn_id).strip())
    if abbr is not None:
        return abbr
    return (fallback or str(espn_id)).strip().upper()


def to_espn_id(abbreviation: str) -> str | None:
    return ABBREVIATION_TO_ESPN_ID.get(abbreviation.strip().upper())
