"""Small, lenient field parsers shared by provider decoders."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

from nfl_ingest.ingestion.providers.base.errors import ProviderDecodeError


def parse_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        pass
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    # "1e400" and "nan" parse as floats but have no integer value.
    return int(number) if math.isfinite(number) else None


def int_or_zero(value: Any) -> int:
    parsed = parse_int(value)
    return parsed if parsed is not None else 0


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse a provider timestamp into a naive UTC datetime.

    Accepts ISO strings with "Z", an explicit offset, or no offset (treated
    as UTC), plus ESPN's minute-precision form "2024-09-08T17:00Z".
    Returns None on anything unparseable.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(v)
    except ValueError:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def feet_inches_from_inches(value: Any) -> str | None:
    inches = parse_int(value)
    if inches is None or inches <= 0:
        return None
    return f"{inches // 12}-{inches % 12}"


def normalize_height(value: Any) -> str | None:
    """Heights arrive as total inches (74), feet-inches text ("6-2") or 6'2"."""
    if value is None:
        return None
    if isinstance(value, int | float):
        return feet_inches_from_inches(value)

    text = str(value).strip().replace('"', "")
    if not text:
        return None
    if "'" in text:
        feet, _, inches = text.partition("'")
        text = f"{feet.strip()}-{inches.strip() or 0}"
    if "-" in text:
        return text
    return feet_inches_from_inches(text)


def require_list(payload: Any, key: str | None = None, *, provider: str) -> list[Any]:
    """The top-level collection of a payload; anything else is malformed."""
    value = payload
    if key is not None:
        if not isinstance(payload, dict):
            raise ProviderDecodeError(
                f"{provider}: expected a JSON object with '{key}'",
                context={"got": type(payload).__name__},
            )
        value = payload.get(key)

    if not isinstance(value, list):
        raise ProviderDecodeError(
            f"{provider}: expected a list" + (f" under '{key}'" if key else ""),
            context={"got": type(value).__name__},
        )
    return value


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
