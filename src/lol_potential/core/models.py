"""Pydantic data models: the shared business objects.

Records sourced from the Riot API accept Riot's camelCase keys verbatim.
The analysis output serializes with camelCase keys for the HTTP endpoint.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Tier(str, Enum):
    """Competitive rank tiers, lowest first."""

    IRON = "IRON"
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    EMERALD = "EMERALD"
    DIAMOND = "DIAMOND"
    MASTER = "MASTER"
    GRANDMASTER = "GRANDMASTER"
    CHALLENGER = "CHALLENGER"
    UNRANKED = "UNRANKED"


class Trend(str, Enum):
    """Direction of recent performance."""

    ASCENDING = "ascending"
    STABLE = "stable"
    DESCENDING = "descending"


class RankSource(str, Enum):
    """Where a rank entry came from."""

    LEAGUE = "league"
    MATCH_EMBEDDED = "match_embedded"
    ESTIMATED = "estimated"


class RiotModel(BaseModel):
    """Base for immutable records read from the Riot API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class MatchParticipantRecord(RiotModel):
    """One player's stats within one match."""

    puuid: str = ""
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    total_minions_killed: int = 0
    neutral_minions_killed: int = 0
    vision_score: int = 0
    total_damage_dealt_to_champions: int = 0
    gold_earned: int = 0
    champion_name: str = ""
    team_position: str = ""
    win: bool = False
    wards_placed: int = 0
    wards_killed: int = 0
    dragon_kills: int = 0
    baron_kills: int = 0
    turret_kills: int = 0
    damage_dealt_to_objectives: int = 0
    total_damage_taken: int = 0
    total_heal: int = 0
    time_ccing_others: int = Field(0, alias="timeCCingOthers")
    summoner_level: int = 0
    summoner_id: Optional[str] = None
    summoner_name: Optional[str] = None
    tier: Optional[str] = None
    rank: Optional[str] = None
    league_points: Optional[int] = None

    @property
    def minions_killed(self) -> int:
        return self.total_minions_killed + self.neutral_minions_killed


class MatchRecord(RiotModel):
    """A Match-V5 match reduced to what the analysis needs."""

    match_id: str = ""
    game_duration: int = Field(0, description="Game duration in seconds")
    participants: list[MatchParticipantRecord] = Field(default_factory=list)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "MatchRecord":
        """Build from a raw Match-V5 response body."""
        metadata = payload.get("metadata") or {}
        info = payload.get("info") or {}
        return cls(
            match_id=metadata.get("matchId", ""),
            game_duration=info.get("gameDuration", 0),
            participants=info.get("participants", []),
        )

    def find_participant(self, puuid: str) -> Optional[MatchParticipantRecord]:
        return next((p for p in self.participants if p.puuid == puuid), None)


class RankEntry(RiotModel):
    """A league entry for one queue."""

    queue_type: str = "RANKED_SOLO_5x5"
    tier: Tier
    division: str = Field("", alias="rank")
    league_points: int = 0
    wins: int = 0
    losses: int = 0
    hot_streak: bool = False
    source: RankSource = RankSource.LEAGUE
    confidence: Optional[str] = None

    @property
    def games(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        return (self.wins / self.games) * 100 if self.games else 0.0


class MatchPerformance(BaseModel):
    """Derived metrics for one matched participant record."""

    win: bool
    kills: int
    deaths: int
    assists: int
    kda: float
    cs: int
    cs_per_minute: float
    vision_score: int
    vision_score_per_minute: float
    damage_dealt: int
    damage_per_minute: float
    gold_earned: int
    gold_per_minute: float
    wards_placed: int
    wards_killed: int
    champion_name: str
    team_position: str
    game_duration: int
    dragon_kills: int
    baron_kills: int
    turret_kills: int
    damage_to_objectives: int
    damage_taken: int
    healing_done: int
    cc_score: int


class PerformanceMetrics(BaseModel):
    """Averages over the matched records of a match list.

    The field defaults are the documented fallback used when no match
    contains the analysed player.
    """

    recent_win_rate: float = 50
    avg_kda: float = 1.0
    avg_kills: float = 5
    avg_deaths: float = 6
    avg_assists: float = 8
    avg_cs_per_minute: float = 5
    avg_gold_per_minute: float = 300
    avg_vision_score_per_minute: float = 1
    avg_wards_placed: float = 10
    avg_wards_killed: float = 2
    avg_damage_per_minute: float = 400
    avg_damage_taken: float = 15000
    objective_participation: float = 1
    consistency: float = 50
    game_impact: float = 50
    performances: list[MatchPerformance] = Field(default_factory=list)
    games_analyzed: int = 0


class ChampionStat(BaseModel):
    name: str
    games: int
    win_rate: float
    avg_kda: float


class PositionStat(BaseModel):
    position: str
    games: int
    win_rate: float


class PlayStyle(BaseModel):
    """Champion and role preferences over the matched records."""

    most_played_champion: Optional[ChampionStat] = None
    most_played_position: Optional[PositionStat] = None
    champion_pool: list[ChampionStat] = Field(default_factory=list)
    position_flexibility: list[PositionStat] = Field(default_factory=list)
    versatility: float = 30
    specialization: float = 0


class RankEstimateStats(BaseModel):
    """Averages used to estimate a rank when the League API has none."""

    level: float = 30
    kda: float = 1.0
    cs_per_minute: float = 5.0
    vision_score_per_minute: float = 1.0
    damage_per_minute: float = 400
    gold_per_minute: float = 300
    win_rate: float = 50
    matches: int = 0


class Narrative(BaseModel):
    one_liner: str
    strengths: list[str]
    improvements: list[str]


class PotentialAnalysis(BaseModel):
    """The analysis returned to the caller."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summoner_name: str
    tier: str = Field(description="Tier name, or a label when no rank is known")
    division: str = ""
    lp: int = 0
    win_rate: int = 0
    recent_games: int = 0
    rank_source: Optional[RankSource] = None
    potential_score: int = Field(ge=0, le=100)
    potential_text: str
    strengths: list[str] = Field(max_length=4)
    improvements: list[str] = Field(max_length=4)
    trend: Trend
