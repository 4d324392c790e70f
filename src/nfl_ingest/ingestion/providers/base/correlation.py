from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class CorrelationKey:
    season: int
    week: int
    home_abbreviation: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "home_abbreviation", self.home_abbreviation.strip().upper())

    def __str__(self) -> str:
        return f"{self.season}:{self.week}:{self.home_abbreviation}"


class CorrelationCache:
    """Volatile map from a domain key to a provider-native event id.

    One instance per provider binding. Entries are written by the schedule
    (games) fetch and read by the dependent stats fetch; they are never
    persisted and never authoritative.
    """

    def __init__(self, provider_key: str) -> None:
        self.provider_key = provider_key
        self._entries: dict[CorrelationKey, str] = {}
        self._lock = threading.Lock()

    def put(self, key: CorrelationKey, native_id: str) -> None:
        with self._lock:
            self._entries[key] = native_id

    def get(self, key: CorrelationKey) -> str | None:
        with self._lock:
            return self._entries.get(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    @staticmethod
    def miss_message(key: CorrelationKey) -> str:
        return f"no native id for key {key}; run the games fetch first"
