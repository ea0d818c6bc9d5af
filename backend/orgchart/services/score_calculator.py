"""Final score computation and the growth-score support calculator."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from orgchart.models.evaluation import (
    DEFAULT_WEIGHTS,
    Evaluatee,
    Evaluation,
    EvaluationStats,
    ScoreCategory,
    ScoreSupportResponse,
)
from orgchart.models.organization import Employee

logger = logging.getLogger(__name__)

MAX_CATEGORY_SCORE = 100
DEFAULT_GRADE = "G3"

SCORE_CATEGORIES: list[ScoreCategory] = [
    ScoreCategory(
        id="skill",
        name="スキル向上",
        target="日常業務を高度化・効率化する技術・手法の習得",
        coefficient=1.0,
        scores={"T4": 120, "T3": 100, "T2": 80, "T1": 50},
    ),
    ScoreCategory(
        id="qualification",
        name="資格取得",
        target="国家資格・ベンダー資格などの客観的証明の取得",
        coefficient=1.1,
        scores={"T4": 130, "T3": 110, "T2": 90, "T1": 60},
    ),
    ScoreCategory(
        id="knowledge",
        name="知識深化",
        target="業界・学術知識の体系的深化／社内外への発信",
        coefficient=1.0,
        scores={"T4": 120, "T3": 100, "T2": 80, "T1": 50},
    ),
    ScoreCategory(
        id="leadership",
        name="リーダーシップ",
        target="チーム運営・プロジェクト管理・メンバー指導",
        coefficient=1.2,
        scores={"T4": 140, "T3": 120, "T2": 95, "T1": 70},
    ),
]

_CATEGORIES_BY_ID = {c.id: c for c in SCORE_CATEGORIES}


class ScoreCalculationError(Exception):
    pass


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_final_score(evaluation: Evaluation) -> int | None:
    """Weighted mean of the three sub-scores, or ``None`` while any is missing."""
    scores = (evaluation.score1, evaluation.score2, evaluation.score3)
    if any(s is None for s in scores):
        return None

    weights = (evaluation.weight1, evaluation.weight2, evaluation.weight3)
    total_weight = sum(weights)
    if total_weight <= 0:
        logger.warning("Evaluation %s has no positive weight; final score not computable", evaluation.id)
        return None

    weighted = sum(s * w for s, w in zip(scores, weights))
    return round_half_up(weighted / total_weight)


def _lookup(category_id: str, tier: str) -> tuple[ScoreCategory, int]:
    category = _CATEGORIES_BY_ID.get(category_id)
    if category is None:
        raise ScoreCalculationError(f"Unknown score category: {category_id}")
    base = category.scores.get(tier)  # type: ignore[call-overload]
    if base is None:
        raise ScoreCalculationError(f"Unknown achievement tier: {tier}")
    return category, base


def calculate_category_score(category_id: str, tier: str) -> int:
    """Suggested growth score for an achievement tier, capped at 100."""
    category, base = _lookup(category_id, tier)
    return min(MAX_CATEGORY_SCORE, round_half_up(base * category.coefficient))


def score_support(category_id: str, tier: str) -> ScoreSupportResponse:
    category, base = _lookup(category_id, tier)
    return ScoreSupportResponse(
        category_id=category_id,
        tier=tier,  # type: ignore[arg-type]
        base_score=base,
        coefficient=category.coefficient,
        score=calculate_category_score(category_id, tier),
    )


def summarize_evaluations(evaluations: Iterable[Evaluation]) -> EvaluationStats:
    items = list(evaluations)
    completed = sum(1 for e in items if e.status == "COMPLETED")
    in_progress = sum(1 for e in items if e.status == "IN_PROGRESS")
    pending = sum(1 for e in items if e.status == "PENDING")
    rate = round_half_up(completed / len(items) * 100) if items else 0
    return EvaluationStats(
        total=len(items),
        completed=completed,
        in_progress=in_progress,
        pending=pending,
        completion_rate=rate,
    )


def to_evaluatee(employee: Employee) -> Evaluatee:
    return Evaluatee(
        id=employee.id,
        name=employee.name,
        email=employee.email,
        position=employee.position,
        grade=employee.qualification_grade or DEFAULT_GRADE,
        weight1=DEFAULT_WEIGHTS[0],
        weight2=DEFAULT_WEIGHTS[1],
        weight3=DEFAULT_WEIGHTS[2],
    )
