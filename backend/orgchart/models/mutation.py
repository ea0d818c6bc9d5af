"""Request / response bodies for organization edits."""

from __future__ import annotations

from pydantic import BaseModel, Field

from orgchart.models.organization import Organization


class MoveRequest(BaseModel):
    """A drop target translated into placement coordinates."""

    employee_id: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    section: str = ""
    course: str | None = None
    preserve_override: bool = False


class EvaluatorOverrideRequest(BaseModel):
    evaluator_id: str | None = None


class EvaluatorFlagRequest(BaseModel):
    is_evaluator: bool | None = None


class MutationResponse(BaseModel):
    changed: bool
    organization: Organization
