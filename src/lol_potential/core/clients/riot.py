"""Riot Games API client.

API docs: https://developer.riotgames.com/apis
Account-V1 and Match-V5 use regional routing (asia/americas/europe),
Summoner-V4 and League-V4 use platform routing (kr/na1/euw1/...).
Development keys allow 20 requests/second and 100 requests/2 minutes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..errors import (
    ConfigurationError,
    NetworkError,
    RiotApiError,
    UpstreamRateLimited,
    error_for_status,
)
from ..metrics import summarize_for_rank_estimate
from ..models import MatchRecord, RankEntry, RankSource, Tier
from ..scoring import estimate_rank

logger = logging.getLogger(__name__)

RANKED_SOLO_QUEUE = "RANKED_SOLO_5x5"
RANKED_SOLO_QUEUE_ID = 420
DEFAULT_TAG_LINE = "KR1"
ESTIMATION_MATCH_IDS = 10
ESTIMATION_MATCH_DETAILS = 3

PLATFORM_HOSTS = {
    "kr": "https://kr.api.riotgames.com",
    "jp1": "https://jp1.api.riotgames.com",
    "na1": "https://na1.api.riotgames.com",
    "euw1": "https://euw1.api.riotgames.com",
    "eun1": "https://eun1.api.riotgames.com",
}

REGIONAL_HOSTS = {
    "asia": "https://asia.api.riotgames.com",
    "americas": "https://americas.api.riotgames.com",
    "europe": "https://europe.api.riotgames.com",
}


def _host(hosts: dict[str, str], key: str) -> str:
    return hosts.get(key, f"https://{key}.api.riotgames.com")


class RiotClient:
    """Thin async wrapper over the Riot endpoints the analysis needs.

    Use as an async context manager so the underlying connection pool is
    closed. Every call raises a typed ``RiotApiError`` on failure.
    """

    def __init__(
        self,
        api_key: str,
        platform: str = "kr",
        region: str = "asia",
        match_fetch_delay_seconds: float = 3.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ConfigurationError("Riot API key is not configured")
        self.platform_base = _host(PLATFORM_HOSTS, platform)
        self.regional_base = _host(REGIONAL_HOSTS, region)
        self.match_fetch_delay_seconds = match_fetch_delay_seconds
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(30.0, connect=10.0),
            headers={
                "X-Riot-Token": api_key,
                "User-Agent": "lol-potential/0.1.0",
                "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "RiotClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, url: str, params: Optional[dict] = None) -> Any:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error: {exc}") from exc

        if response.is_error:
            raise error_for_status(response.status_code, url)
        try:
            return response.json()
        except ValueError as exc:
            raise RiotApiError(f"Invalid JSON response from {url}", response.status_code) from exc

    # ─── Endpoints ───────────────────────────────────────────────────────────

    async def get_account_by_riot_id(self, game_name: str, tag_line: str) -> dict:
        url = (
            f"{self.regional_base}/riot/account/v1/accounts/by-riot-id/"
            f"{quote(game_name, safe='')}/{quote(tag_line, safe='')}"
        )
        logger.info("Fetching account for %s#%s", game_name, tag_line)
        return await self._get(url)

    async def get_summoner_by_puuid(self, puuid: str) -> dict:
        url = f"{self.platform_base}/lol/summoner/v4/summoners/by-puuid/{quote(puuid, safe='')}"
        data = await self._get(url)
        if not data.get("id"):
            logger.warning("Summoner ID unavailable, the API key may have limited permissions")
        return data

    async def get_summoner_by_name(self, summoner_name: str) -> dict:
        """Legacy lookup by bare summoner name. Deprecated upstream."""
        url = f"{self.platform_base}/lol/summoner/v4/summoners/by-name/{quote(summoner_name, safe='')}"
        logger.warning("Using deprecated summoner name lookup for %s", summoner_name)
        return await self._get(url)

    async def get_league_entries(self, summoner_id: str) -> list[dict]:
        url = f"{self.platform_base}/lol/league/v4/entries/by-summoner/{quote(summoner_id, safe='')}"
        return await self._get(url)

    async def get_match_ids(self, puuid: str, count: int = 20, queue: int = RANKED_SOLO_QUEUE_ID) -> list[str]:
        url = f"{self.regional_base}/lol/match/v5/matches/by-puuid/{quote(puuid, safe='')}/ids"
        match_ids = await self._get(url, params={"start": 0, "count": count, "queue": queue})
        logger.info("Found %d recent matches", len(match_ids))
        return match_ids

    async def get_match(self, match_id: str) -> MatchRecord:
        url = f"{self.regional_base}/lol/match/v5/matches/{quote(match_id, safe='')}"
        payload = await self._get(url)
        try:
            return MatchRecord.from_api(payload)
        except (ValidationError, AttributeError) as exc:
            raise RiotApiError(f"Unexpected match payload for {match_id}: {exc}") from exc

    async def get_matches(self, match_ids: Sequence[str]) -> list[MatchRecord]:
        """Fetch match details one at a time, pausing between calls.

        A failed match is logged and skipped. Rate limiting aborts the batch.
        """
        matches = []
        for i, match_id in enumerate(match_ids):
            try:
                matches.append(await self.get_match(match_id))
            except UpstreamRateLimited:
                raise
            except RiotApiError as exc:
                logger.warning("Failed to fetch match %s (%d/%d): %s", match_id, i + 1, len(match_ids), exc)

            if (i + 1) % 5 == 0 or i == len(match_ids) - 1:
                logger.info("Progress: %d/%d matches fetched", i + 1, len(match_ids))

            if i < len(match_ids) - 1 and self.match_fetch_delay_seconds > 0:
                await asyncio.sleep(self.match_fetch_delay_seconds)

        logger.info("Completed: %d/%d matches", len(matches), len(match_ids))
        return matches

    # ─── Rank resolution ─────────────────────────────────────────────────────

    async def league_rank(self, summoner_id: str) -> RankEntry:
        """Solo queue entry, else the first entry, else an UNRANKED entry."""
        entries = await self.get_league_entries(summoner_id)
        if not entries:
            logger.info("Unranked player")
            return RankEntry(tier=Tier.UNRANKED)

        entry = next((e for e in entries if e.get("queueType") == RANKED_SOLO_QUEUE), entries[0])
        try:
            rank = RankEntry.model_validate(entry)
        except ValidationError as exc:
            raise RiotApiError(f"Unexpected league entry for {summoner_id}: {exc}") from exc
        logger.info(
            "Rank: %s %s %dLP (%dW %dL)",
            rank.tier.value, rank.division, rank.league_points, rank.wins, rank.losses,
        )
        return rank

    async def resolve_rank(
        self,
        puuid: str,
        summoner_id: Optional[str] = None,
        summoner: Optional[dict] = None,
    ) -> Optional[RankEntry]:
        """Try each rank strategy in order and return the first result.

        Pass an already fetched summoner-by-puuid payload as ``summoner`` to
        avoid requesting it again.
        """
        resolver = RankResolver(self, puuid, summoner_id, summoner)
        return await resolver.resolve()


RankStrategy = Callable[[], Awaitable[Optional[RankEntry]]]


class RankResolver:
    """Ordered fallbacks for finding a player's rank.

    Each strategy returns a ``RankEntry`` or None. Upstream failures other
    than rate limiting are logged and count as None. Recent matches are
    fetched at most once and shared between the match-based strategies.
    """

    def __init__(
        self,
        client: RiotClient,
        puuid: str,
        summoner_id: Optional[str] = None,
        summoner: Optional[dict] = None,
    ):
        self.client = client
        self.puuid = puuid
        self.summoner_id = summoner_id
        self.summoner = summoner
        self._first: Optional[MatchRecord] = None
        self._recent: Optional[list[MatchRecord]] = None
        self._recent_ids: Optional[list[str]] = None

    @property
    def strategies(self) -> list[tuple[str, RankStrategy]]:
        return [
            ("summoner id", self.from_summoner_id),
            ("summoner id via puuid", self.from_puuid_summoner),
            ("summoner id via match", self.from_match_summoner_id),
            ("embedded in match", self.from_embedded_rank),
            ("estimated from matches", self.from_estimate),
        ]

    async def resolve(self) -> Optional[RankEntry]:
        for name, strategy in self.strategies:
            try:
                rank = await strategy()
            except UpstreamRateLimited:
                raise
            except RiotApiError as exc:
                logger.warning("Rank strategy '%s' failed: %s", name, exc)
                continue
            if rank is not None:
                logger.info("Rank resolved by '%s'", name)
                return rank
        logger.info("No rank available, analysis will use match performance only")
        return None

    async def _recent_match_ids(self) -> list[str]:
        if self._recent_ids is None:
            self._recent_ids = await self.client.get_match_ids(self.puuid, count=ESTIMATION_MATCH_IDS)
        return self._recent_ids

    async def _recent_matches(self) -> list[MatchRecord]:
        if self._recent is None:
            ids = (await self._recent_match_ids())[:ESTIMATION_MATCH_DETAILS]
            if self._first is not None and ids:
                self._recent = [self._first] + await self.client.get_matches(ids[1:])
            else:
                self._recent = await self.client.get_matches(ids)
        return self._recent

    async def from_summoner_id(self) -> Optional[RankEntry]:
        if not self.summoner_id:
            return None
        return await self.client.league_rank(self.summoner_id)

    async def from_puuid_summoner(self) -> Optional[RankEntry]:
        if self.summoner is not None:
            data = self.summoner
        else:
            data = await self.client.get_summoner_by_puuid(self.puuid)
        summoner_id = data.get("id") or data.get("summonerId") or data.get("encryptedSummonerId")
        if not summoner_id or summoner_id == self.summoner_id:
            return None
        return await self.client.league_rank(summoner_id)

    async def from_match_summoner_id(self) -> Optional[RankEntry]:
        ids = await self._recent_match_ids()
        if not ids:
            return None
        self._first = await self.client.get_match(ids[0])
        participant = self._first.find_participant(self.puuid)
        if participant is None or not participant.summoner_id:
            return None
        rank = await self.client.league_rank(participant.summoner_id)
        return rank if rank.tier != Tier.UNRANKED else None

    async def from_embedded_rank(self) -> Optional[RankEntry]:
        for match in await self._recent_matches():
            participant = match.find_participant(self.puuid)
            if participant is None or not participant.tier or not participant.rank:
                continue
            try:
                tier = Tier(participant.tier.upper())
            except ValueError:
                logger.warning("Unknown embedded tier %s", participant.tier)
                continue
            logger.info("Found embedded rank %s %s", participant.tier, participant.rank)
            return RankEntry(
                tier=tier,
                division=participant.rank,
                league_points=participant.league_points or 0,
                source=RankSource.MATCH_EMBEDDED,
            )
        return None

    async def from_estimate(self) -> Optional[RankEntry]:
        matches = await self._recent_matches()
        if not matches:
            return None
        stats = summarize_for_rank_estimate(matches, self.puuid)
        if stats.matches == 0:
            return None
        return estimate_rank(stats)
