from __future__ import annotations

import base64
from typing import Any

import structlog

from nfl_ingest.core.config import ProviderConfig
from nfl_ingest.db.enums import AuthModeEnum

logger = structlog.get_logger(__name__)

# MySportsFeeds expects HTTP basic auth of "<api key>:MYSPORTSFEEDS". The
# password half is a fixed provider constant, not a user secret.
MYSPORTSFEEDS_BASIC_PASSWORD = "MYSPORTSFEEDS"


def basic_auth_value(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("ascii")).decode("ascii")
    return f"Basic {token}"


def build_auth_headers(config: ProviderConfig, *, log: Any = logger) -> dict[str, str]:
    """Headers for exactly one auth variant; misconfiguration falls back to no auth."""

    if config.auth_mode == AuthModeEnum.NONE:
        return {}

    if config.auth_mode == AuthModeEnum.HEADER:
        if not config.api_key or not config.auth_header_name:
            log.warning(
                "header auth misconfigured, no authentication applied",
                has_api_key=bool(config.api_key),
                auth_header_name=config.auth_header_name,
            )
            return {}
        return {config.auth_header_name: config.api_key}

    if config.auth_mode == AuthModeEnum.BASIC:
        if not config.api_key:
            log.warning("basic auth has no api key, no authentication applied")
            return {}
        return {"Authorization": basic_auth_value(config.api_key, MYSPORTSFEEDS_BASIC_PASSWORD)}

    log.warning("unknown auth mode, no authentication applied", auth_mode=str(config.auth_mode))
    return {}


def bind_headers(config: ProviderConfig, *, user_agent: str | None = None) -> dict[str, str]:
    """User-Agent, then auth headers, then static custom headers.

    Custom headers never overwrite a header already set (compared case-insensitively).
    """
    headers: dict[str, str] = {}
    if user_agent:
        headers["User-Agent"] = user_agent
    headers.update(build_auth_headers(config))

    taken = {k.lower() for k in headers}
    for name, value in config.custom_headers.items():
        if name.lower() in taken:
            logger.debug("custom header ignored, already set", header=name)
            continue
        headers[name] = value
        taken.add(name.lower())
    return headers
