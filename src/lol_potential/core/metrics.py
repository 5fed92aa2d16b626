"""Per-match derived metrics and their aggregation over a match list.

Nothing here raises for missing data: matches without the analysed player
are skipped, and an empty result falls back to documented defaults.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from .models import (
    ChampionStat,
    MatchParticipantRecord,
    MatchPerformance,
    MatchRecord,
    PerformanceMetrics,
    PlayStyle,
    PositionStat,
    RankEstimateStats,
)

logger = logging.getLogger(__name__)

DEFAULT_CONSISTENCY = 50.0
DEFAULT_GAME_IMPACT = 50.0


def _matched_records(
    matches: Iterable[MatchRecord], puuid: str
) -> list[tuple[MatchRecord, MatchParticipantRecord]]:
    matched = []
    for match in matches:
        participant = match.find_participant(puuid)
        if participant is None:
            logger.debug("Player not found in match %s, skipping", match.match_id)
            continue
        if match.game_duration <= 0:
            logger.warning("Match %s has no duration, skipping", match.match_id)
            continue
        matched.append((match, participant))
    return matched


def compute_kda(kills: int, deaths: int, assists: int) -> float:
    return (kills + assists) / max(deaths, 1)


def match_performance(match: MatchRecord, p: MatchParticipantRecord) -> MatchPerformance:
    """Derive the per-minute metrics for one participant record."""
    minutes = match.game_duration / 60
    return MatchPerformance(
        win=p.win,
        kills=p.kills,
        deaths=p.deaths,
        assists=p.assists,
        kda=compute_kda(p.kills, p.deaths, p.assists),
        cs=p.minions_killed,
        cs_per_minute=p.minions_killed / minutes,
        vision_score=p.vision_score,
        vision_score_per_minute=p.vision_score / minutes,
        damage_dealt=p.total_damage_dealt_to_champions,
        damage_per_minute=p.total_damage_dealt_to_champions / minutes,
        gold_earned=p.gold_earned,
        gold_per_minute=p.gold_earned / minutes,
        wards_placed=p.wards_placed,
        wards_killed=p.wards_killed,
        champion_name=p.champion_name,
        team_position=p.team_position,
        game_duration=match.game_duration,
        dragon_kills=p.dragon_kills,
        baron_kills=p.baron_kills,
        turret_kills=p.turret_kills,
        damage_to_objectives=p.damage_dealt_to_objectives,
        damage_taken=p.total_damage_taken,
        healing_done=p.total_heal,
        cc_score=p.time_ccing_others,
    )


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def population_stddev(values: list[float]) -> float:
    mean = _mean(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def metric_consistency(values: list[float]) -> float:
    """Map spread to 0-100. Lower standard deviation scores higher."""
    return max(0.0, min(100.0, 100 - population_stddev(values) * 20))


def calculate_consistency(performances: list[MatchPerformance]) -> float:
    """Average consistency of KDA, damage/min and vision/min."""
    if len(performances) <= 1:
        return DEFAULT_CONSISTENCY

    kda = metric_consistency([p.kda for p in performances])
    damage = metric_consistency([p.damage_per_minute for p in performances])
    vision = metric_consistency([p.vision_score_per_minute for p in performances])
    return (kda + damage + vision) / 3


def calculate_game_impact(performances: list[MatchPerformance]) -> float:
    if not performances:
        return DEFAULT_GAME_IMPACT

    avg_kda = _mean([p.kda for p in performances])
    avg_damage = _mean([p.damage_per_minute for p in performances])
    avg_vision = _mean([p.vision_score_per_minute for p in performances])
    avg_objectives = _mean([p.dragon_kills + p.baron_kills for p in performances])

    impact = (avg_kda * 25) + (avg_damage / 20) + (avg_vision * 30) + (avg_objectives * 20)
    return min(100.0, max(0.0, impact))


def calculate_performance_metrics(matches: Iterable[MatchRecord], puuid: str) -> PerformanceMetrics:
    """Average the per-match metrics of ``puuid`` across ``matches``."""
    performances = [match_performance(m, p) for m, p in _matched_records(matches, puuid)]

    if not performances:
        return PerformanceMetrics()

    wins = sum(1 for p in performances if p.win)
    total = len(performances)

    return PerformanceMetrics(
        recent_win_rate=(wins / total) * 100,
        avg_kda=_mean([p.kda for p in performances]),
        avg_kills=_mean([p.kills for p in performances]),
        avg_deaths=_mean([p.deaths for p in performances]),
        avg_assists=_mean([p.assists for p in performances]),
        avg_cs_per_minute=_mean([p.cs_per_minute for p in performances]),
        avg_gold_per_minute=_mean([p.gold_per_minute for p in performances]),
        avg_vision_score_per_minute=_mean([p.vision_score_per_minute for p in performances]),
        avg_wards_placed=_mean([p.wards_placed for p in performances]),
        avg_wards_killed=_mean([p.wards_killed for p in performances]),
        avg_damage_per_minute=_mean([p.damage_per_minute for p in performances]),
        avg_damage_taken=_mean([p.damage_taken for p in performances]),
        objective_participation=_mean([p.dragon_kills + p.baron_kills + p.turret_kills for p in performances]),
        consistency=calculate_consistency(performances),
        game_impact=calculate_game_impact(performances),
        performances=performances,
        games_analyzed=total,
    )


def analyze_play_style(matches: Iterable[MatchRecord], puuid: str) -> PlayStyle:
    """Summarize champion and position preferences."""
    records = [p for _, p in _matched_records(matches, puuid)]
    if not records:
        return PlayStyle()

    # name -> [games, wins, kda_sum]
    champions: dict[str, list[float]] = {}
    positions: dict[str, list[int]] = {}
    for p in records:
        champ = champions.setdefault(p.champion_name, [0, 0, 0.0])
        champ[0] += 1
        champ[1] += 1 if p.win else 0
        champ[2] += compute_kda(p.kills, p.deaths, p.assists)

        pos = positions.setdefault(p.team_position, [0, 0])
        pos[0] += 1
        pos[1] += 1 if p.win else 0

    champion_pool = [
        ChampionStat(name=name, games=int(games), win_rate=(wins / games) * 100, avg_kda=kda / games)
        for name, (games, wins, kda) in champions.items()
    ]
    position_flexibility = [
        PositionStat(position=position, games=games, win_rate=(wins / games) * 100)
        for position, (games, wins) in positions.items()
    ]

    # max() keeps the first of equal counts, so earlier matches win ties
    most_played_champion = max(champion_pool, key=lambda c: c.games)
    most_played_position = max(position_flexibility, key=lambda s: s.games)

    return PlayStyle(
        most_played_champion=most_played_champion,
        most_played_position=most_played_position,
        champion_pool=champion_pool,
        position_flexibility=position_flexibility,
        versatility=min(100, len(champions) * 10 + len(positions) * 15),
        specialization=(most_played_champion.games / len(records)) * 100,
    )


def summarize_for_rank_estimate(matches: Iterable[MatchRecord], puuid: str) -> RankEstimateStats:
    """Average the stats that feed rank estimation.

    KDA here counts a deathless game as kills + assists, unlike the
    aggregate KDA above.
    """
    matched = _matched_records(matches, puuid)
    if not matched:
        return RankEstimateStats()

    levels, kdas, cs, vision, damage, gold = [], [], [], [], [], []
    wins = 0
    for match, p in matched:
        minutes = match.game_duration / 60
        levels.append(p.summoner_level)
        kdas.append((p.kills + p.assists) / p.deaths if p.deaths > 0 else p.kills + p.assists)
        cs.append(p.minions_killed / minutes)
        vision.append(p.vision_score / minutes)
        damage.append(p.total_damage_dealt_to_champions / minutes)
        gold.append(p.gold_earned / minutes)
        wins += 1 if p.win else 0

    return RankEstimateStats(
        level=_mean(levels),
        kda=_mean(kdas),
        cs_per_minute=_mean(cs),
        vision_score_per_minute=_mean(vision),
        damage_per_minute=_mean(damage),
        gold_per_minute=_mean(gold),
        win_rate=(wins / len(matched)) * 100,
        matches=len(matched),
    )
