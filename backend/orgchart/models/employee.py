"""Employee search and detail models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from orgchart.models.organization import Employee

SortField = Literal["name", "position", "department", "joinDate", "qualificationGrade"]
SortDirection = Literal["asc", "desc"]


class EmployeeSearchFilters(BaseModel):
    """Filters for the employee search table. Empty values match everything."""

    text: str = ""
    department: str = ""
    section: str = ""
    course: str = ""
    positions: list[str] = []
    qualification_grade: str = ""


class EmployeeSummary(BaseModel):
    """An employee row with its resolved evaluation relation."""

    employee: Employee
    evaluator_id: str | None = None
    evaluator_name: str | None = None
    evaluatee_count: int = 0


class EmployeeSearchResult(BaseModel):
    items: list[EmployeeSummary]
    total: int
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int


class EmployeeDetail(EmployeeSummary):
    """Full employee view including the people they evaluate."""

    evaluatees: list[Employee] = []
