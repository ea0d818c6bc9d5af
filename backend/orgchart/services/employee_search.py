"""Filtering, sorting and pagination for the employee search table."""

from __future__ import annotations

import math

from orgchart.models.employee import (
    EmployeeSearchFilters,
    EmployeeSearchResult,
    EmployeeSummary,
    SortDirection,
    SortField,
)
from orgchart.models.organization import Employee, Organization
from orgchart.services.evaluation_relations import build_evaluation_map

POSITION_CATEGORIES: dict[str, list[str]] = {
    "管理職": ["本部長", "副本部長", "部長", "課長", "管理職"],
    "エンジニア": [
        "シニアエンジニア",
        "エンジニア",
        "ジュニアエンジニア",
        "インフラエンジニア",
        "テストエンジニア",
        "QAエンジニア",
        "セキュリティエンジニア",
        "ペネトレーションテスター",
    ],
    "専門職": ["法務スペシャリスト", "コンプライアンス担当", "QAスペシャリスト", "セキュリティアナリスト", "技術戦略担当"],
    "一般職": ["課長", "一般社員", "主任", "本部付主任", "アシスタント", "本部アシスタント"],
}

GRADE_ORDER = ["SA", "S4", "S3", "S2", "S1", "C3", "C2", "C1", "G1", "G2", "G3", "E3", "E2", "E1"]

DEFAULT_PAGE_SIZE = 20


def _matches_position(position: str, selected: list[str]) -> bool:
    if position in selected:
        return True
    return any(name in selected and position in members for name, members in POSITION_CATEGORIES.items())


def filter_employees(employees: list[Employee], filters: EmployeeSearchFilters) -> list[Employee]:
    result = employees

    if filters.text:
        needle = filters.text.lower()
        result = [
            e
            for e in result
            if needle in e.name.lower() or needle in e.employee_id.lower() or needle in e.email.lower()
        ]
    if filters.department:
        result = [e for e in result if e.department == filters.department]
    if filters.section:
        result = [e for e in result if e.section == filters.section]
    if filters.course:
        result = [e for e in result if e.course == filters.course]
    if filters.positions:
        result = [e for e in result if _matches_position(e.position, filters.positions)]
    if filters.qualification_grade:
        result = [e for e in result if e.qualification_grade == filters.qualification_grade]

    return result


def _sort_key(field: SortField):
    if field == "position":
        return lambda e: e.position
    if field == "department":
        return lambda e: f"{e.department} {e.section} {e.course or ''}"
    if field == "joinDate":
        return lambda e: e.join_date
    if field == "qualificationGrade":
        return lambda e: (
            GRADE_ORDER.index(e.qualification_grade) if e.qualification_grade else len(GRADE_ORDER)
        )
    return lambda e: e.name


def sort_employees(
    employees: list[Employee],
    field: SortField = "name",
    direction: SortDirection | None = "asc",
) -> list[Employee]:
    if direction is None:
        return list(employees)
    return sorted(employees, key=_sort_key(field), reverse=direction == "desc")


def search_employees(
    org: Organization,
    filters: EmployeeSearchFilters | None = None,
    sort_field: SortField = "name",
    sort_direction: SortDirection | None = "asc",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> EmployeeSearchResult:
    filters = filters or EmployeeSearchFilters()
    matched = sort_employees(filter_employees(org.employees, filters), sort_field, sort_direction)

    relations = build_evaluation_map(org)
    start = (page - 1) * page_size
    items: list[EmployeeSummary] = []
    for employee in matched[start : start + page_size]:
        relation = relations[employee.id]
        items.append(
            EmployeeSummary(
                employee=employee,
                evaluator_id=relation.evaluator.id if relation.evaluator else None,
                evaluator_name=relation.evaluator.name if relation.evaluator else None,
                evaluatee_count=relation.evaluatee_count,
            )
        )

    return EmployeeSearchResult(
        items=items,
        total=len(matched),
        page=page,
        page_size=page_size,
        total_pages=math.ceil(len(matched) / page_size),
    )
