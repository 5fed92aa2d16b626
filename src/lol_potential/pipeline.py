"""Fetch-then-analyze pipeline for one summoner.

All raw data is fetched live from the Riot API for each request; nothing is
cached or persisted between runs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional
from urllib.parse import unquote

from .config import Settings, load_settings
from .core.analysis import analyze_potential
from .core.clients.riot import DEFAULT_TAG_LINE, RiotClient
from .core.errors import InvalidSummonerInput, UpstreamNotFound
from .core.models import PotentialAnalysis

logger = logging.getLogger(__name__)


def parse_summoner_input(summoner_input: str) -> tuple[str, Optional[str]]:
    """Split ``name#tag`` into (name, tag). A bare name returns (name, None)."""
    decoded = unquote(summoner_input).strip()
    if not decoded:
        raise InvalidSummonerInput("Summoner input is required")

    if "#" not in decoded:
        return decoded, None

    game_name, tag_line = decoded.split("#", 1)
    game_name = game_name.strip()
    if not game_name:
        raise InvalidSummonerInput("Invalid Riot ID format. Expected format: gameName#tagLine")
    return game_name, tag_line.strip() or DEFAULT_TAG_LINE


async def analyze_summoner(
    summoner_input: str,
    client: RiotClient,
    match_count: int = 20,
) -> PotentialAnalysis:
    """Look up a player, fetch rank and recent matches, and analyze them."""
    game_name, tag_line = parse_summoner_input(summoner_input)

    if tag_line is not None:
        account = await client.get_account_by_riot_id(game_name, tag_line)
    else:
        account = await client.get_summoner_by_name(game_name)

    puuid = account.get("puuid")
    if not puuid:
        raise UpstreamNotFound("PUUID not found")

    summoner = await client.get_summoner_by_puuid(puuid)
    rank = await client.resolve_rank(puuid, summoner.get("id"), summoner=summoner)

    match_ids = await client.get_match_ids(puuid, count=match_count)
    matches = await client.get_matches(match_ids)

    logger.info("Starting potential analysis over %d matches", len(matches))
    analysis = analyze_potential(unquote(summoner_input).strip(), rank, matches, puuid)
    logger.info(
        "Analysis completed: score %d, trend %s",
        analysis.potential_score, analysis.trend.value,
    )
    return analysis


async def run_analysis(summoner_input: str, settings: Optional[Settings] = None) -> PotentialAnalysis:
    """Run the full pipeline with a fresh client built from settings."""
    settings = settings or load_settings()

    if settings.request_delay_seconds > 0:
        await asyncio.sleep(settings.request_delay_seconds)

    async with RiotClient(
        settings.riot_api_key,
        platform=settings.platform,
        region=settings.region,
        match_fetch_delay_seconds=settings.match_fetch_delay_seconds,
    ) as client:
        return await analyze_summoner(summoner_input, client, match_count=settings.match_count)
