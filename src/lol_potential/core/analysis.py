"""Combine metrics, scoring and narrative into one PotentialAnalysis."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .metrics import analyze_play_style, calculate_performance_metrics
from .models import MatchRecord, PotentialAnalysis, RankEntry, Tier, Trend
from .narrative import INSUFFICIENT_DATA, generate_narrative
from .scoring import (
    DEFAULT_SCORING,
    ScoringConfig,
    determine_trend,
    round_half_up,
    score_match_only,
    score_with_rank,
)

logger = logging.getLogger(__name__)

PERFORMANCE_BASED = "Performance-Based"
UNKNOWN = "Unknown"
INSUFFICIENT_DATA_SCORE = 50


def analyze_potential(
    summoner_name: str,
    rank: Optional[RankEntry],
    matches: Sequence[MatchRecord],
    puuid: str,
    config: ScoringConfig = DEFAULT_SCORING,
) -> PotentialAnalysis:
    """Score a player's potential from their rank and recent matches.

    An absent or UNRANKED entry selects the match-only formula; any other
    entry selects the rank-weighted one.
    """
    ranked = rank is not None and rank.tier != Tier.UNRANKED

    if not ranked and not matches:
        logger.info("No rank and no matches for %s, returning insufficient-data analysis", summoner_name)
        return PotentialAnalysis(
            summoner_name=summoner_name,
            tier=rank.tier.value if rank is not None else UNKNOWN,
            potential_score=INSUFFICIENT_DATA_SCORE,
            potential_text=INSUFFICIENT_DATA.one_liner,
            strengths=list(INSUFFICIENT_DATA.strengths),
            improvements=list(INSUFFICIENT_DATA.improvements),
            trend=Trend.STABLE,
        )

    metrics = calculate_performance_metrics(matches, puuid)
    play_style = analyze_play_style(matches, puuid)
    trend = determine_trend(metrics, config)

    if ranked:
        score = score_with_rank(rank, metrics, config)
        narrative = generate_narrative(score, trend, metrics, play_style, rank)
        return PotentialAnalysis(
            summoner_name=summoner_name,
            tier=rank.tier.value,
            division=rank.division,
            lp=rank.league_points,
            win_rate=round_half_up(rank.win_rate),
            recent_games=len(matches),
            rank_source=rank.source,
            potential_score=score,
            potential_text=narrative.one_liner,
            strengths=narrative.strengths,
            improvements=narrative.improvements,
            trend=trend,
        )

    logger.info("Analyzing %s from match performance only", summoner_name)
    score = score_match_only(metrics, config)
    narrative = generate_narrative(score, trend, metrics, play_style)
    return PotentialAnalysis(
        summoner_name=summoner_name,
        tier=rank.tier.value if rank is not None else PERFORMANCE_BASED,
        win_rate=round_half_up(metrics.recent_win_rate),
        recent_games=len(matches),
        potential_score=score,
        potential_text=narrative.one_liner,
        strengths=narrative.strengths,
        improvements=narrative.improvements,
        trend=trend,
    )
