from __future__ import annotations

from enum import StrEnum


class ProviderEnum(StrEnum):
    ESPN = "espn"
    SPORTSDATAIO = "sportsdataio"
    MYSPORTSFEEDS = "mysportsfeeds"
    PROFOOTBALLREFERENCE = "profootballreference"


class AuthModeEnum(StrEnum):
    NONE = "none"
    HEADER = "header"
    BASIC = "basic"


class ConferenceEnum(StrEnum):
    AFC = "AFC"
    NFC = "NFC"
