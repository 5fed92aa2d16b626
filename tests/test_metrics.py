import pytest

from lol_potential.core.metrics import (
    analyze_play_style,
    calculate_consistency,
    calculate_performance_metrics,
    metric_consistency,
    summarize_for_rank_estimate,
)
from lol_potential.core.models import MatchRecord, PerformanceMetrics, PlayStyle, RankEstimateStats

from factories import PUUID, match_payload, match_record, participant


def test_no_matched_records_returns_default_metrics() -> None:
    other_player = MatchRecord.from_api(match_payload(participants=[participant(puuid="someone-else")]))

    result = calculate_performance_metrics([other_player], PUUID)

    assert result == PerformanceMetrics()
    assert result.recent_win_rate == 50
    assert result.avg_kda == 1.0
    assert result.avg_cs_per_minute == 5
    assert result.avg_vision_score_per_minute == 1
    assert result.consistency == 50
    assert result.games_analyzed == 0


def test_empty_match_list_returns_default_metrics() -> None:
    assert calculate_performance_metrics([], PUUID) == PerformanceMetrics()


def test_per_minute_metrics_for_one_match() -> None:
    game = match_record(duration=1800, kills=6, deaths=2, assists=4, cs=180, vision=45, damage=24000, gold=12000,
                        neutralMinionsKilled=30)

    result = calculate_performance_metrics([game], PUUID)

    assert result.avg_kda == pytest.approx(5.0)
    assert result.avg_cs_per_minute == pytest.approx(7.0)
    assert result.avg_vision_score_per_minute == pytest.approx(1.5)
    assert result.avg_damage_per_minute == pytest.approx(800.0)
    assert result.avg_gold_per_minute == pytest.approx(400.0)
    assert result.recent_win_rate == 100
    assert result.games_analyzed == 1


def test_deathless_game_divides_by_one() -> None:
    result = calculate_performance_metrics([match_record(kills=4, deaths=0, assists=3)], PUUID)
    assert result.avg_kda == pytest.approx(7.0)


def test_matches_without_player_are_skipped() -> None:
    games = [
        match_record("KR_1", win=True),
        MatchRecord.from_api(match_payload("KR_2", participants=[participant(puuid="other", win=False)])),
        match_record("KR_3", win=False),
    ]

    result = calculate_performance_metrics(games, PUUID)

    assert result.games_analyzed == 2
    assert result.recent_win_rate == 50


def test_zero_duration_match_is_skipped() -> None:
    result = calculate_performance_metrics([match_record(duration=0)], PUUID)
    assert result == PerformanceMetrics()


def test_consistency_defaults_for_single_match() -> None:
    result = calculate_performance_metrics([match_record()], PUUID)
    assert result.consistency == 50


def test_identical_matches_are_fully_consistent() -> None:
    result = calculate_performance_metrics([match_record("KR_1"), match_record("KR_2")], PUUID)
    assert result.consistency == pytest.approx(100.0)


def test_consistency_uses_population_stddev() -> None:
    # KDA 1.0 and 3.0 -> stddev 1.0 -> 80; damage and vision identical -> 100
    games = [
        match_record("KR_1", kills=2, deaths=4, assists=2),
        match_record("KR_2", kills=6, deaths=4, assists=6),
    ]
    result = calculate_performance_metrics(games, PUUID)

    assert metric_consistency([1.0, 3.0]) == pytest.approx(80.0)
    assert result.consistency == pytest.approx((80 + 100 + 100) / 3)


def test_metric_consistency_is_clamped_to_zero() -> None:
    assert metric_consistency([0.0, 100.0]) == 0.0


def test_calculate_consistency_with_no_performances() -> None:
    assert calculate_consistency([]) == 50


def test_objective_participation_sums_dragons_barons_turrets() -> None:
    result = calculate_performance_metrics(
        [match_record(dragonKills=1, baronKills=1, turretKills=2)], PUUID
    )
    assert result.objective_participation == pytest.approx(4.0)


def test_play_style_versatility_and_most_played() -> None:
    games = [
        match_record("KR_1", champion="Ahri", position="MIDDLE", win=True),
        match_record("KR_2", champion="Ahri", position="MIDDLE", win=True),
        match_record("KR_3", champion="Lee Sin", position="JUNGLE", win=False),
    ]

    style = analyze_play_style(games, PUUID)

    assert style.most_played_champion.name == "Ahri"
    assert style.most_played_champion.games == 2
    assert style.most_played_champion.win_rate == pytest.approx(100.0)
    assert style.most_played_position.position == "MIDDLE"
    assert len(style.champion_pool) == 2
    assert style.versatility == 2 * 10 + 2 * 15
    assert style.specialization == pytest.approx(200 / 3)


def test_play_style_ties_go_to_first_seen() -> None:
    games = [match_record("KR_1", champion="Zed"), match_record("KR_2", champion="Ahri")]
    assert analyze_play_style(games, PUUID).most_played_champion.name == "Zed"


def test_play_style_versatility_is_capped() -> None:
    games = [
        match_record(f"KR_{i}", champion=f"Champ{i}", position=pos)
        for i, pos in enumerate(["TOP", "JUNGLE", "MIDDLE", "BOTTOM", "UTILITY", "TOP", "JUNGLE"])
    ]
    assert analyze_play_style(games, PUUID).versatility == 100


def test_play_style_defaults_without_matches() -> None:
    assert analyze_play_style([], PUUID) == PlayStyle()


def test_rank_estimate_stats() -> None:
    games = [
        match_record("KR_1", kills=4, deaths=0, assists=2, summonerLevel=120, win=True),
        match_record("KR_2", kills=2, deaths=2, assists=2, summonerLevel=120, win=False),
    ]

    stats = summarize_for_rank_estimate(games, PUUID)

    # deathless game counts kills + assists
    assert stats.kda == pytest.approx((6 + 2) / 2)
    assert stats.level == 120
    assert stats.win_rate == 50
    assert stats.matches == 2


def test_rank_estimate_stats_default() -> None:
    assert summarize_for_rank_estimate([], PUUID) == RankEstimateStats()
