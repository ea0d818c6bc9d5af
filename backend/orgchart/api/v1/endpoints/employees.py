from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from orgchart.core.dependencies import get_store, require_permission
from orgchart.core.store import OrganizationStore, OrganizationStoreError
from orgchart.models.auth import UserInfo
from orgchart.models.employee import (
    EmployeeDetail,
    EmployeeSearchFilters,
    EmployeeSearchResult,
    SortDirection,
    SortField,
)
from orgchart.services.employee_search import DEFAULT_PAGE_SIZE, search_employees
from orgchart.services.evaluation_relations import build_evaluation_map, select_direct_reports

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=EmployeeSearchResult)
async def list_employees(
    q: str = "",
    department: str = "",
    section: str = "",
    course: str = "",
    positions: list[str] = Query([]),  # noqa: B008
    qualification_grade: str = "",
    sort: SortField = "name",
    direction: SortDirection | None = "asc",
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=200),
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    filters = EmployeeSearchFilters(
        text=q,
        department=department,
        section=section,
        course=course,
        positions=positions,
        qualification_grade=qualification_grade,
    )
    try:
        org = store.load()
    except OrganizationStoreError as err:
        logger.exception("Failed to list employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err
    return search_employees(org, filters, sort, direction, page, page_size)


@router.get("/{employee_id}", response_model=EmployeeDetail)
async def get_employee(
    employee_id: str,
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    try:
        org = store.load()
    except OrganizationStoreError as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employee",
        ) from err

    employee = org.find_employee(employee_id)
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee '{employee_id}' not found",
        )

    relations = build_evaluation_map(org)
    evaluator = relations[employee_id].evaluator
    return EmployeeDetail(
        employee=employee,
        evaluator_id=evaluator.id if evaluator else None,
        evaluator_name=evaluator.name if evaluator else None,
        evaluatee_count=relations[employee_id].evaluatee_count,
        evaluatees=select_direct_reports(employee_id, org, relations),
    )
