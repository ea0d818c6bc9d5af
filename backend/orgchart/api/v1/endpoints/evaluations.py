from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from orgchart.core.dependencies import get_store, require_permission
from orgchart.core.store import OrganizationStore, OrganizationStoreError
from orgchart.models.auth import UserInfo
from orgchart.models.evaluation import (
    EvaluateeListResponse,
    Evaluation,
    EvaluationStats,
    FinalScoreResponse,
    ScoreCategory,
    ScoreSupportRequest,
    ScoreSupportResponse,
)
from orgchart.services.evaluation_relations import get_direct_reports
from orgchart.services.score_calculator import (
    SCORE_CATEGORIES,
    ScoreCalculationError,
    calculate_final_score,
    score_support,
    summarize_evaluations,
    to_evaluatee,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.get("/evaluators/{evaluator_id}/evaluatees", response_model=EvaluateeListResponse)
async def list_evaluatees(
    evaluator_id: str,
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    try:
        org = store.load()
    except OrganizationStoreError as err:
        logger.exception("Failed to load organization for evaluator %s", evaluator_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve organization",
        ) from err

    evaluator = org.find_employee(evaluator_id)
    if evaluator is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Evaluator '{evaluator_id}' not found",
        )

    reports = get_direct_reports(evaluator_id, org)
    return EvaluateeListResponse(
        evaluator=evaluator,
        evaluatees=[to_evaluatee(e) for e in reports],
    )


@router.post("/final-score", response_model=FinalScoreResponse)
async def final_score(
    evaluation: Evaluation,
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    score = calculate_final_score(evaluation)
    return FinalScoreResponse(final_score=score, computable=score is not None)


@router.get("/score-categories", response_model=list[ScoreCategory])
async def score_categories(
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    return SCORE_CATEGORIES


@router.post("/score-support", response_model=ScoreSupportResponse)
async def support_score(
    request: ScoreSupportRequest,
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    try:
        return score_support(request.category_id, request.tier)
    except ScoreCalculationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.post("/stats", response_model=EvaluationStats)
async def evaluation_stats(
    evaluations: list[Evaluation],
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    return summarize_evaluations(evaluations)
