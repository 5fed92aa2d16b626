import pytest

from lol_potential.core.models import ChampionStat, RankEntry, Tier, Trend
from lol_potential.core.narrative import (
    IMPROVEMENT_FALLBACK,
    MATCH_ONLY_IMPROVEMENT_FALLBACK,
    MATCH_ONLY_STRENGTH_FALLBACK,
    STRENGTH_FALLBACK,
    generate_narrative,
    one_liner,
)

from factories import metrics, play_style

GOLD = RankEntry(tier=Tier.GOLD, division="II", wins=30, losses=30)
NO_GAMES = RankEntry(tier=Tier.GOLD, division="II")


def _middling():
    """Metrics that trip none of the strength or improvement rules."""
    return metrics(
        avg_kda=2.0,
        avg_cs_per_minute=6.0,
        avg_vision_score_per_minute=1.8,
        recent_win_rate=55,
        consistency=70,
        objective_participation=2.0,
        avg_damage_per_minute=500,
        avg_deaths=5,
    )


def test_rank_narrative_falls_back_when_no_rule_matches() -> None:
    narrative = generate_narrative(60, Trend.STABLE, _middling(), play_style(versatility=50, specialization=40), NO_GAMES)
    assert narrative.strengths == [STRENGTH_FALLBACK]
    assert narrative.improvements == [IMPROVEMENT_FALLBACK]


def test_match_only_narrative_falls_back_when_no_rule_matches() -> None:
    narrative = generate_narrative(60, Trend.STABLE, _middling(), play_style())
    assert narrative.strengths == [MATCH_ONLY_STRENGTH_FALLBACK]
    assert narrative.improvements == [MATCH_ONLY_IMPROVEMENT_FALLBACK]


def test_strengths_are_truncated_to_four_in_rule_order() -> None:
    strong = metrics(
        avg_kda=4.0,
        avg_cs_per_minute=8.2,
        avg_vision_score_per_minute=2.6,
        recent_win_rate=70,
        consistency=80,
        objective_participation=3,
    )
    narrative = generate_narrative(90, Trend.ASCENDING, strong, play_style(versatility=80), GOLD)

    assert len(narrative.strengths) == 4
    assert narrative.strengths[0] == "우수한 KDA 4.0로 안정적인 플레이 실력"
    assert narrative.strengths[1] == "분당 8.2 CS의 뛰어난 파밍 능력"
    assert narrative.strengths[3] == "최근 70% 승률로 강력한 상승 모멘텀"


def test_improvements_are_truncated_to_four_in_rule_order() -> None:
    weak = metrics(
        avg_kda=1.0,
        avg_cs_per_minute=4.0,
        avg_vision_score_per_minute=0.8,
        consistency=40,
        objective_participation=0.5,
        avg_damage_per_minute=300,
    )
    narrative = generate_narrative(30, Trend.DESCENDING, weak, play_style(versatility=20, specialization=10), GOLD)

    assert len(narrative.improvements) == 4
    assert narrative.improvements[0] == "데스 줄이기와 안전한 포지셔닝 연습으로 생존력 향상"
    assert narrative.improvements[1] == "분당 CS를 5.0개 이상으로 향상시켜 골드 효율성 개선"


def test_season_win_rate_rules_use_rank_record() -> None:
    hot = RankEntry(tier=Tier.GOLD, wins=70, losses=30)
    cold = RankEntry(tier=Tier.GOLD, wins=40, losses=60)
    style = play_style(versatility=50, specialization=40)

    assert "랭크 게임 70% 승률로 꾸준한 티어 상승" in generate_narrative(60, Trend.STABLE, _middling(), style, hot).strengths
    assert generate_narrative(60, Trend.STABLE, _middling(), style, cold).improvements == [
        "게임 이해도 향상과 메타 챔피언 학습으로 승률 개선"
    ]


def test_main_champion_strength() -> None:
    style = play_style(
        versatility=50,
        specialization=40,
        most_played_champion=ChampionStat(name="Ahri", games=5, win_rate=80, avg_kda=3.0),
    )
    narrative = generate_narrative(60, Trend.STABLE, _middling(), style, NO_GAMES)
    assert narrative.strengths == ["주력 챔피언 Ahri에서 80% 승률"]


@pytest.mark.parametrize(
    "score, overrides, style, fragment",
    [
        (90, {"avg_kda": 3.5, "avg_cs_per_minute": 8}, {}, "캐리형"),
        (90, {"avg_vision_score_per_minute": 3}, {}, "전략가형"),
        (85, {}, {}, "올라운드"),
        (75, {"consistency": 80}, {}, "신뢰형"),
        (75, {}, {"versatility": 65}, "만능형"),
        (70, {}, {}, "성장형"),
        (60, {"avg_cs_per_minute": 6.5}, {}, "농부형"),
        (60, {"objective_participation": 3}, {}, "한타형"),
        (55, {}, {}, "발전 중인"),
        (45, {}, {}, "도전형"),
        (39, {}, {}, "학습형"),
    ],
)
def test_one_liner_buckets(score: int, overrides: dict, style: dict, fragment: str) -> None:
    text = one_liner(score, Trend.ASCENDING, metrics(**overrides), play_style(**style))
    assert fragment in text
    assert "상승세" in text


@pytest.mark.parametrize(
    "score, fragment",
    [(85, "상위권"), (70, "꾸준한 성장세"), (55, "개선 여지"), (40, "기본기 연습")],
)
def test_match_only_one_liner_buckets(score: int, fragment: str) -> None:
    narrative = generate_narrative(score, Trend.STABLE, metrics(recent_win_rate=62.5, avg_kda=2.46), play_style())
    assert fragment in narrative.one_liner
    assert "63%" in narrative.one_liner


def test_narrative_is_deterministic() -> None:
    m = metrics(avg_kda=2.7, avg_cs_per_minute=7.1, recent_win_rate=66)
    style = play_style(versatility=75)
    first = generate_narrative(77, Trend.ASCENDING, m, style, GOLD)
    second = generate_narrative(77, Trend.ASCENDING, m, style, GOLD)
    assert first.model_dump_json() == second.model_dump_json()


@pytest.mark.parametrize("rank", [None, GOLD, NO_GAMES])
@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"avg_kda": 5, "avg_cs_per_minute": 9, "avg_vision_score_per_minute": 3, "recent_win_rate": 80,
         "consistency": 90, "objective_participation": 4},
        {"avg_kda": 0.5, "avg_cs_per_minute": 2, "avg_vision_score_per_minute": 0.2, "recent_win_rate": 20,
         "consistency": 10, "objective_participation": 0, "avg_damage_per_minute": 100, "avg_deaths": 10},
    ],
)
def test_lists_are_never_empty_and_at_most_four(rank, overrides: dict) -> None:
    narrative = generate_narrative(50, Trend.STABLE, metrics(**overrides), play_style(versatility=80), rank)
    assert 1 <= len(narrative.strengths) <= 4
    assert 1 <= len(narrative.improvements) <= 4
