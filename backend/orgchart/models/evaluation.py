"""Pydantic models for the evaluation companion app."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from orgchart.models.organization import Employee, _CamelModel

EvaluationStatus = Literal["PENDING", "IN_PROGRESS", "COMPLETED"]
AchievementTier = Literal["T4", "T3", "T2", "T1"]

DEFAULT_WEIGHTS = (30, 40, 30)


class Evaluatee(_CamelModel):
    """An employee as seen from their evaluator's dashboard."""

    id: str
    name: str | None = None
    email: str = ""
    image: str | None = None
    position: str | None = None
    grade: str | None = None
    weight1: float = DEFAULT_WEIGHTS[0]
    weight2: float = DEFAULT_WEIGHTS[1]
    weight3: float = DEFAULT_WEIGHTS[2]


class Evaluation(_CamelModel):
    """Result / process / growth scores with their weights.

    Weights are percentages and need not sum to 100.
    """

    id: str | None = None
    evaluator_id: str | None = Field(None, alias="evaluatorId")
    evaluatee_id: str | None = Field(None, alias="evaluateeId")
    status: EvaluationStatus = "PENDING"
    period: str | None = None
    score1: float | None = Field(None, ge=0, le=100)
    score2: float | None = Field(None, ge=0, le=100)
    score3: float | None = Field(None, ge=0, le=100)
    weight1: float = Field(DEFAULT_WEIGHTS[0], ge=0)
    weight2: float = Field(DEFAULT_WEIGHTS[1], ge=0)
    weight3: float = Field(DEFAULT_WEIGHTS[2], ge=0)
    comment2: str | None = None
    comment3: str | None = None


class FinalScoreResponse(BaseModel):
    final_score: int | None
    computable: bool


class ScoreCategory(BaseModel):
    id: str
    name: str
    target: str
    coefficient: float
    scores: dict[AchievementTier, int]


class ScoreSupportRequest(BaseModel):
    category_id: str
    tier: AchievementTier


class ScoreSupportResponse(BaseModel):
    category_id: str
    tier: AchievementTier
    base_score: int
    coefficient: float
    score: int


class EvaluationStats(BaseModel):
    total: int
    completed: int
    in_progress: int
    pending: int
    completion_rate: int


class EvaluateeListResponse(BaseModel):
    evaluator: Employee
    evaluatees: list[Evaluatee]
