"""Korean narrative text for a potential analysis.

Pure and deterministic: the same inputs always produce the same text.
Strengths and improvements are built by testing fixed predicates in order,
keeping at most four, with a fallback line when none apply.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence

from .models import Narrative, PerformanceMetrics, PlayStyle, RankEntry, Trend
from .scoring import round_half_up

MAX_ITEMS = 4

TREND_WORDS: Mapping[Trend, str] = MappingProxyType({
    Trend.ASCENDING: "상승세",
    Trend.STABLE: "안정적",
    Trend.DESCENDING: "하락세",
})

INSUFFICIENT_DATA = Narrative(
    one_liner="최근 경기 데이터가 부족하여 분석이 어렵습니다",
    strengths=["더 많은 게임 플레이 권장"],
    improvements=["게임 활동량 증가 필요"],
)

STRENGTH_FALLBACK = "게임에 대한 열정과 지속적인 참여 의지"
IMPROVEMENT_FALLBACK = "현재 실력 유지를 위한 꾸준한 연습과 메타 적응"
MATCH_ONLY_STRENGTH_FALLBACK = "게임에 대한 열정과 개선 의지"
MATCH_ONLY_IMPROVEMENT_FALLBACK = "지속적인 게임 플레이를 통한 경험 축적"

# A rule returns its sentence when it applies, otherwise None.
Rule = Callable[[PerformanceMetrics, PlayStyle, Optional[RankEntry]], Optional[str]]


def _season_win_rate(rank: Optional[RankEntry]) -> Optional[float]:
    if rank is None or rank.games == 0:
        return None
    return rank.win_rate


def _collect(
    rules: Sequence[Rule],
    fallback: str,
    metrics: PerformanceMetrics,
    play_style: PlayStyle,
    rank: Optional[RankEntry],
) -> list[str]:
    lines = []
    for rule in rules:
        line = rule(metrics, play_style, rank)
        if line is not None:
            lines.append(line)
    if not lines:
        lines.append(fallback)
    return lines[:MAX_ITEMS]


# ─── Rank-inclusive narrative ────────────────────────────────────────────────


def one_liner(score: int, trend: Trend, metrics: PerformanceMetrics, play_style: PlayStyle) -> str:
    word = TREND_WORDS[trend]

    if score >= 85:
        if metrics.avg_kda > 3.0 and metrics.avg_cs_per_minute > 7:
            return f"뛰어난 파밍과 킬 관여로 게임을 주도하는 {word} 캐리형 플레이어"
        if metrics.avg_vision_score_per_minute > 2.5:
            return f"탁월한 시야 관리와 맵 컨트롤로 팀을 이끄는 {word} 전략가형 플레이어"
        return f"모든 영역에서 뛰어난 실력을 보이는 {word} 올라운드 플레이어"

    if score >= 70:
        if metrics.consistency > 75:
            return f"일관성 있는 플레이로 팀에 안정감을 주는 {word} 신뢰형 플레이어"
        if play_style.versatility > 60:
            return f"다양한 챔피언과 포지션을 소화하는 {word} 만능형 플레이어"
        return f"꾸준한 성장과 발전 가능성을 보이는 {word} 성장형 플레이어"

    if score >= 55:
        if metrics.avg_cs_per_minute > 6:
            return f"뛰어난 파밍 능력을 바탕으로 성장하는 {word} 농부형 플레이어"
        if metrics.objective_participation > 2:
            return f"오브젝트 싸움에서 빛을 발하는 {word} 한타형 플레이어"
        return f"현재 티어에서 {word} 플레이를 보이며 발전 중인 플레이어"

    if score >= 40:
        return f"기본기 향상을 통해 한 단계 도약을 준비하는 {word} 도전형 플레이어"

    return f"체계적인 연습과 게임 이해도 향상이 필요한 {word} 학습형 플레이어"


def _main_champion_strength(
    metrics: PerformanceMetrics, play_style: PlayStyle, rank: Optional[RankEntry]
) -> Optional[str]:
    champ = play_style.most_played_champion
    if champ is not None and champ.win_rate > 70:
        return f"주력 챔피언 {champ.name}에서 {champ.win_rate:.0f}% 승률"
    return None


def _season_strength(
    metrics: PerformanceMetrics, play_style: PlayStyle, rank: Optional[RankEntry]
) -> Optional[str]:
    win_rate = _season_win_rate(rank)
    if win_rate is not None and win_rate > 60:
        return f"랭크 게임 {win_rate:.0f}% 승률로 꾸준한 티어 상승"
    return None


def _season_improvement(
    metrics: PerformanceMetrics, play_style: PlayStyle, rank: Optional[RankEntry]
) -> Optional[str]:
    win_rate = _season_win_rate(rank)
    if win_rate is not None and win_rate < 55:
        return "게임 이해도 향상과 메타 챔피언 학습으로 승률 개선"
    return None


STRENGTH_RULES: tuple[Rule, ...] = (
    lambda m, s, r: f"우수한 KDA {m.avg_kda:.1f}로 안정적인 플레이 실력" if m.avg_kda > 2.5 else None,
    lambda m, s, r: f"분당 {m.avg_cs_per_minute:.1f} CS의 뛰어난 파밍 능력" if m.avg_cs_per_minute > 6.5 else None,
    lambda m, s, r: (
        f"분당 {m.avg_vision_score_per_minute:.1f} 시야 점수의 탁월한 맵 컨트롤"
        if m.avg_vision_score_per_minute > 2.0 else None
    ),
    lambda m, s, r: f"최근 {m.recent_win_rate:.0f}% 승률로 강력한 상승 모멘텀" if m.recent_win_rate > 65 else None,
    lambda m, s, r: "일관성 있는 퍼포먼스로 팀에 안정감 제공" if m.consistency > 75 else None,
    lambda m, s, r: "드래곤, 바론 등 주요 오브젝트 싸움에서 높은 기여도" if m.objective_participation > 2.5 else None,
    lambda m, s, r: f"{len(s.champion_pool)}개 챔피언으로 높은 챔피언 숙련도" if s.versatility > 70 else None,
    _main_champion_strength,
    _season_strength,
)

IMPROVEMENT_RULES: tuple[Rule, ...] = (
    lambda m, s, r: "데스 줄이기와 안전한 포지셔닝 연습으로 생존력 향상" if m.avg_kda < 1.8 else None,
    lambda m, s, r: (
        f"분당 CS를 {m.avg_cs_per_minute + 1:.1f}개 이상으로 향상시켜 골드 효율성 개선"
        if m.avg_cs_per_minute < 5.5 else None
    ),
    lambda m, s, r: "와드 설치 및 시야 관리 능력 강화로 맵 컨트롤 향상" if m.avg_vision_score_per_minute < 1.5 else None,
    lambda m, s, r: "일관성 있는 플레이를 위한 주력 챔피언 숙련도 집중 향상" if m.consistency < 60 else None,
    lambda m, s, r: "드래곤, 바론 타이밍 인식 향상으로 오브젝트 관여율 증대" if m.objective_participation < 1.5 else None,
    lambda m, s, r: "딜량 향상을 위한 아이템 빌드 최적화와 교전 참여도 증가" if m.avg_damage_per_minute < 400 else None,
    lambda m, s, r: "다양한 챔피언 학습으로 픽밴 단계에서의 유연성 확보" if s.versatility < 40 else None,
    lambda m, s, r: "주력 챔피언 선정 후 집중적인 숙련도 향상" if s.specialization < 30 else None,
    _season_improvement,
)


# ─── Match-only narrative ────────────────────────────────────────────────────


def match_only_one_liner(score: int, metrics: PerformanceMetrics) -> str:
    win_rate = round_half_up(metrics.recent_win_rate)
    if score >= 80:
        return f"뛰어난 게임 퍼포먼스로 {win_rate}% 승률과 {metrics.avg_kda:.1f} KDA를 기록하는 상위권 실력의 플레이어"
    if score >= 65:
        return f"안정적인 플레이로 {win_rate}% 승률을 유지하며 꾸준한 성장세를 보이는 플레이어"
    if score >= 50:
        return f"평균적인 실력으로 {win_rate}% 승률을 기록하며 개선 여지가 있는 플레이어"
    return f"{win_rate}% 승률로 실력 향상이 필요하며 기본기 연습을 통한 성장이 기대되는 플레이어"


MATCH_ONLY_STRENGTH_RULES: tuple[Rule, ...] = (
    lambda m, s, r: "높은 KDA로 안정적인 플레이 능력" if m.avg_kda >= 2.5 else None,
    lambda m, s, r: "우수한 CS 수급 능력" if m.avg_cs_per_minute >= 7.0 else None,
    lambda m, s, r: "높은 승률로 게임 캐리 능력" if m.recent_win_rate >= 60 else None,
)

MATCH_ONLY_IMPROVEMENT_RULES: tuple[Rule, ...] = (
    lambda m, s, r: "데스 줄이기와 안전한 포지셔닝 연습" if m.avg_kda < 1.5 else None,
    lambda m, s, r: "CS 수급 패턴 개선 및 라인전 실력 향상" if m.avg_cs_per_minute < 6.0 else None,
    lambda m, s, r: "맵 인식 능력 향상과 위험 상황 판단력 개선" if m.avg_deaths > 7 else None,
)


def generate_narrative(
    score: int,
    trend: Trend,
    metrics: PerformanceMetrics,
    play_style: PlayStyle,
    rank: Optional[RankEntry] = None,
) -> Narrative:
    """Pick the one-liner, strengths and improvements for an analysis.

    With ``rank`` the rank-inclusive templates are used, otherwise the
    match-only ones.
    """
    if rank is None:
        return Narrative(
            one_liner=match_only_one_liner(score, metrics),
            strengths=_collect(MATCH_ONLY_STRENGTH_RULES, MATCH_ONLY_STRENGTH_FALLBACK, metrics, play_style, rank),
            improvements=_collect(
                MATCH_ONLY_IMPROVEMENT_RULES, MATCH_ONLY_IMPROVEMENT_FALLBACK, metrics, play_style, rank
            ),
        )

    return Narrative(
        one_liner=one_liner(score, trend, metrics, play_style),
        strengths=_collect(STRENGTH_RULES, STRENGTH_FALLBACK, metrics, play_style, rank),
        improvements=_collect(IMPROVEMENT_RULES, IMPROVEMENT_FALLBACK, metrics, play_style, rank),
    )
