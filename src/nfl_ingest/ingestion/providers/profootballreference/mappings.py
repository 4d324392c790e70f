"""Pro-Football-Reference franchise codes.

PFR addresses teams by lowercase franchise codes that mostly predate
relocations (``rai`` for Las Vegas, ``oti`` for Tennessee). Everything stored
locally is keyed by the standard abbreviation.
"""

from __future__ import annotations

PFR_TO_ABBREVIATION: dict[str, str] = {
    "crd": "ARI",
    "atl": "ATL",
    "rav": "BAL",
    "buf": "BUF",
    "car": "CAR",
    "chi": "CHI",
    "cin": "CIN",
    "cle": "CLE",
    "dal": "DAL",
    "den": "DEN",
    "det": "DET",
    "gnb": "GB",
    "htx": "HOU",
    "clt": "IND",
    "jax": "JAX",
    "kan": "KC",
    "rai": "LV",
    "sdg": "LAC",
    "ram": "LAR",
    "mia": "MIA",
    "min": "MIN",
    "nwe": "NE",
    "nor": "NO",
    "nyg": "NYG",
    "nyj": "NYJ",
    "phi": "PHI",
    "pit": "PIT",
    "sfo": "SF",
    "sea": "SEA",
    "tam": "TB",
    "oti": "TEN",
    "was": "WAS",
}

ABBREVIATION_TO_PFR: dict[str, str] = {v: k for k, v in PFR_TO_ABBREVIATION.items()}


def to_abbreviation(code: str) -> str:
    """Standard abbreviation for a PFR code; box scores print codes uppercase."""
    cleaned = code.strip().lower()
    return PFR_TO_ABBREVIATION.get(cleaned, cleaned.upper())


def to_pfr(abbreviation: str) -> str:
    cleaned = abbreviation.strip().upper()
    return ABBREVIATION_TO_PFR.get(cleaned, cleaned.lower())
