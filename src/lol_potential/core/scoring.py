"""Potential scoring. Turns aggregated metrics and rank into a 0-100 score.

Two formulas coexist. With a known rank the score is a weighted sum anchored
on the tier; without one it is a base-50 threshold table over match stats.
Their weights and bases differ and are kept apart on purpose.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .models import (
    PerformanceMetrics,
    RankEntry,
    RankEstimateStats,
    RankSource,
    Tier,
    Trend,
)

logger = logging.getLogger(__name__)

# (threshold, points), checked from the top; first hit wins
Steps = Sequence[tuple[float, float]]

TIER_SCORES: Mapping[Tier, float] = MappingProxyType({
    Tier.IRON: 15,
    Tier.BRONZE: 25,
    Tier.SILVER: 35,
    Tier.GOLD: 45,
    Tier.PLATINUM: 60,
    Tier.DIAMOND: 75,
    Tier.MASTER: 85,
    Tier.GRANDMASTER: 90,
    Tier.CHALLENGER: 95,
})


class ScoringConfig(BaseModel):
    """Weights and threshold tables for both scoring formulas."""

    model_config = ConfigDict(frozen=True)

    tier_scores: Mapping[Tier, float] = Field(default_factory=lambda: TIER_SCORES)
    unknown_tier_score: float = 30

    # Rank-inclusive weighted sum
    tier_weight: float = 0.30
    kda_weight: float = 0.25
    cs_weight: float = 0.15
    vision_weight: float = 0.15
    win_rate_weight: float = 0.10
    consistency_weight: float = 0.05
    kda_scale: float = 25
    cs_scale: float = 12
    vision_scale: float = 40

    # Match-only threshold table
    match_only_base: float = 50
    match_only_kda: Steps = ((3.0, 25), (2.0, 15), (1.5, 10), (1.0, 5))
    match_only_win_rate: Steps = ((70, 25), (60, 20), (55, 15), (50, 10))
    match_only_cs: Steps = ((8.0, 15), (6.5, 10), (5.0, 5))
    match_only_vision: Steps = ((2.0, 10), (1.5, 5))

    # Trend
    ascending_win_rate: float = 60
    ascending_kda: float = 2.0
    descending_win_rate: float = 45
    descending_kda: float = 1.5


DEFAULT_SCORING = ScoringConfig()


def _step_points(value: float, steps: Steps) -> float:
    for threshold, points in steps:
        if value >= threshold:
            return points
    return 0


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def tier_base_score(tier: Tier, config: ScoringConfig = DEFAULT_SCORING) -> float:
    return config.tier_scores.get(tier, config.unknown_tier_score)


def score_match_only(metrics: PerformanceMetrics, config: ScoringConfig = DEFAULT_SCORING) -> int:
    """Score from match stats alone, used when no rank is known."""
    win_rate = round_half_up(metrics.recent_win_rate)

    score = config.match_only_base
    score += _step_points(metrics.avg_kda, config.match_only_kda)
    score += _step_points(win_rate, config.match_only_win_rate)
    score += _step_points(metrics.avg_cs_per_minute, config.match_only_cs)
    score += _step_points(metrics.avg_vision_score_per_minute, config.match_only_vision)

    return int(_clamp(score))


def score_with_rank(
    rank: RankEntry,
    metrics: PerformanceMetrics,
    config: ScoringConfig = DEFAULT_SCORING,
) -> int:
    """Weighted potential score anchored on the rank tier."""
    score = tier_base_score(rank.tier, config) * config.tier_weight
    score += min(100, metrics.avg_kda * config.kda_scale) * config.kda_weight
    score += min(100, metrics.avg_cs_per_minute * config.cs_scale) * config.cs_weight
    score += min(100, metrics.avg_vision_score_per_minute * config.vision_scale) * config.vision_weight
    score += metrics.recent_win_rate * config.win_rate_weight
    score += metrics.consistency * config.consistency_weight

    return round_half_up(_clamp(score))


def determine_trend(metrics: PerformanceMetrics, config: ScoringConfig = DEFAULT_SCORING) -> Trend:
    if metrics.recent_win_rate > config.ascending_win_rate and metrics.avg_kda > config.ascending_kda:
        return Trend.ASCENDING
    if metrics.recent_win_rate < config.descending_win_rate and metrics.avg_kda < config.descending_kda:
        return Trend.DESCENDING
    return Trend.STABLE


# ─── Rank estimation ─────────────────────────────────────────────────────────

ESTIMATE_LEVEL: Steps = ((300, 20), (200, 15), (150, 12), (100, 8), (50, 5))
ESTIMATE_KDA: Steps = ((3.0, 25), (2.5, 20), (2.0, 15), (1.5, 10), (1.0, 5))
ESTIMATE_CS: Steps = ((8.0, 20), (7.0, 15), (6.0, 12), (5.0, 8), (4.0, 4))
ESTIMATE_VISION: Steps = ((2.5, 15), (2.0, 12), (1.5, 8), (1.0, 5))
ESTIMATE_DAMAGE: Steps = ((800, 15), (600, 12), (500, 8), (400, 5))
ESTIMATE_WIN_RATE: Steps = ((70, 5), (60, 3), (50, 1))

# (min score, tier, ((min score, division), ...), confidence)
ESTIMATE_BANDS = (
    (85, Tier.DIAMOND, ((90, "III"),), "IV", "High"),
    (70, Tier.PLATINUM, ((80, "II"),), "III", "High"),
    (55, Tier.GOLD, ((65, "I"), (60, "II")), "III", "Medium"),
    (35, Tier.SILVER, ((50, "I"), (45, "II"), (40, "III")), "IV", "Medium"),
    (20, Tier.BRONZE, ((30, "I"), (25, "II")), "III", "Low"),
    (0, Tier.IRON, ((15, "II"), (10, "III")), "IV", "Low"),
)


def rank_estimate_score(stats: RankEstimateStats) -> float:
    return (
        _step_points(stats.level, ESTIMATE_LEVEL)
        + _step_points(stats.kda, ESTIMATE_KDA)
        + _step_points(stats.cs_per_minute, ESTIMATE_CS)
        + _step_points(stats.vision_score_per_minute, ESTIMATE_VISION)
        + _step_points(stats.damage_per_minute, ESTIMATE_DAMAGE)
        + _step_points(stats.win_rate, ESTIMATE_WIN_RATE)
    )


def estimate_rank(stats: RankEstimateStats) -> RankEntry:
    """Guess a tier and division from match stats.

    The bands are uneven between tiers; they are product tuning.
    """
    score = rank_estimate_score(stats)

    for min_score, tier, divisions, lowest_division, confidence in ESTIMATE_BANDS:
        if score >= min_score:
            division = next((d for threshold, d in divisions if score >= threshold), lowest_division)
            break

    logger.info(
        "Estimated rank %s %s (%s confidence) from %.1f KDA, %.1f CS/min, %.0f%% WR",
        tier.value, division, confidence, stats.kda, stats.cs_per_minute, stats.win_rate,
    )

    return RankEntry(
        tier=tier,
        division=division,
        league_points=int(_clamp((score - 20) * 2)),
        wins=round_half_up(stats.win_rate / 10),
        losses=round_half_up((100 - stats.win_rate) / 10),
        hot_streak=stats.win_rate > 65,
        source=RankSource.ESTIMATED,
        confidence=confidence,
    )
