"""Derived, read-only views of an organization snapshot."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

IssueKind = Literal[
    "dangling_manager",
    "dangling_evaluator",
    "self_evaluator",
    "unknown_placement",
    "duplicate_employee",
]


class IntegrityIssue(BaseModel):
    kind: IssueKind
    subject_id: str
    reference: str | None = None
    message: str


class EvaluationMapEntry(BaseModel):
    employee_id: str
    evaluator_id: str | None = None
    evaluator_name: str | None = None
    evaluatee_count: int = 0


class CountEntry(BaseModel):
    label: str
    count: int


class OrganizationSummary(BaseModel):
    employee_count: int
    department_count: int
    section_count: int
    course_count: int
    departments: list[CountEntry]
    qualification_grades: list[CountEntry]
    age_groups: list[CountEntry]
    join_years: list[CountEntry]
    positions: list[CountEntry]
