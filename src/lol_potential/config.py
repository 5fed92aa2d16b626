"""Runtime settings read from the process environment."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

from .core.errors import ConfigurationError

DEFAULT_PLATFORM = "kr"
DEFAULT_REGION = "asia"
DEFAULT_MATCH_COUNT = 20
DEFAULT_MATCH_FETCH_DELAY_SECONDS = 3.0
DEFAULT_REQUEST_DELAY_SECONDS = 1.0


class Settings(BaseModel):
    """Settings for one analysis run."""

    riot_api_key: str
    platform: str = DEFAULT_PLATFORM
    region: str = DEFAULT_REGION
    match_count: int = Field(DEFAULT_MATCH_COUNT, ge=1, le=20)
    match_fetch_delay_seconds: float = Field(DEFAULT_MATCH_FETCH_DELAY_SECONDS, ge=0)
    request_delay_seconds: float = Field(DEFAULT_REQUEST_DELAY_SECONDS, ge=0)


def get_riot_api_key() -> str:
    key = os.environ.get("RIOT_API_KEY", "").strip()
    if not key:
        raise ConfigurationError(
            "RIOT_API_KEY environment variable is required. Get a key at https://developer.riotgames.com/"
        )
    return key


def load_settings() -> Settings:
    """Build settings from the environment. Raises ConfigurationError without an API key."""
    return Settings(
        riot_api_key=get_riot_api_key(),
        platform=os.environ.get("RIOT_PLATFORM", DEFAULT_PLATFORM).lower(),
        region=os.environ.get("RIOT_REGION", DEFAULT_REGION).lower(),
        match_count=int(os.environ.get("MATCH_COUNT", str(DEFAULT_MATCH_COUNT))),
        match_fetch_delay_seconds=float(os.environ.get(
            "MATCH_FETCH_DELAY_SECONDS",
            str(DEFAULT_MATCH_FETCH_DELAY_SECONDS),
        )),
        request_delay_seconds=float(os.environ.get(
            "REQUEST_DELAY_SECONDS",
            str(DEFAULT_REQUEST_DELAY_SECONDS),
        )),
    )
