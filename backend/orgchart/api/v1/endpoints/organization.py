from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from orgchart.core.dependencies import get_store, require_permission
from orgchart.core.store import OrganizationStore, OrganizationStoreError
from orgchart.models.auth import UserInfo
from orgchart.models.mutation import (
    EvaluatorFlagRequest,
    EvaluatorOverrideRequest,
    MoveRequest,
    MutationResponse,
)
from orgchart.models.organization import Employee, Organization
from orgchart.models.report import EvaluationMapEntry, IntegrityIssue, OrganizationSummary
from orgchart.services.evaluation_relations import build_evaluation_map, evaluator_candidates
from orgchart.services.hierarchy_mutation import (
    move_employee,
    set_evaluator_flag,
    set_evaluator_override,
    update_employee,
)
from orgchart.services.integrity import find_integrity_issues, log_integrity_issues
from orgchart.services.organization_analytics import summarize_organization

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/organization", tags=["organization"])


def _load(store: OrganizationStore) -> Organization:
    try:
        return store.load()
    except OrganizationStoreError as err:
        logger.exception("Failed to load organization")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve organization",
        ) from err


def _commit(store: OrganizationStore, before: Organization, after: Organization) -> MutationResponse:
    if after is before:
        return MutationResponse(changed=False, organization=before)
    try:
        store.save(after)
    except OrganizationStoreError as err:
        logger.exception("Failed to save organization %s", after.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save organization",
        ) from err
    return MutationResponse(changed=True, organization=after)


def _require_employee(org: Organization, employee_id: str) -> Employee:
    employee = org.find_employee(employee_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee '{employee_id}' not found",
        )
    return employee


@router.get("", response_model=Organization, response_model_exclude_none=True)
async def get_organization(
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    return _load(store)


@router.put("", response_model=MutationResponse, response_model_exclude_none=True)
async def replace_organization(
    org: Organization,
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("WRITE")),  # noqa: B008
):
    log_integrity_issues(org)
    return _commit(store, _load(store), org)


@router.get("/evaluation-map", response_model=list[EvaluationMapEntry])
async def get_evaluation_map(
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    org = _load(store)
    relations = build_evaluation_map(org)
    return [
        EvaluationMapEntry(
            employee_id=employee_id,
            evaluator_id=relation.evaluator.id if relation.evaluator else None,
            evaluator_name=relation.evaluator.name if relation.evaluator else None,
            evaluatee_count=relation.evaluatee_count,
        )
        for employee_id, relation in relations.items()
    ]


@router.get("/evaluator-candidates", response_model=list[Employee], response_model_exclude_none=True)
async def get_evaluator_candidates(
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    return evaluator_candidates(_load(store))


@router.get("/integrity", response_model=list[IntegrityIssue])
async def get_integrity_issues(
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    return find_integrity_issues(_load(store))


@router.get("/analytics", response_model=OrganizationSummary)
async def get_analytics(
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("READ")),  # noqa: B008
):
    return summarize_organization(_load(store))


@router.post("/moves", response_model=MutationResponse, response_model_exclude_none=True)
async def move(
    request: MoveRequest,
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("WRITE")),  # noqa: B008
):
    org = _load(store)
    employee = _require_employee(org, request.employee_id)
    updated = move_employee(
        employee,
        request.department,
        request.section,
        request.course,
        org,
        preserve_override=request.preserve_override,
    )
    return _commit(store, org, updated)


@router.put("/employees/{employee_id}", response_model=MutationResponse, response_model_exclude_none=True)
async def edit_employee(
    employee_id: str,
    employee: Employee,
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("WRITE")),  # noqa: B008
):
    if employee.id != employee_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Employee id in path and body differ",
        )
    org = _load(store)
    _require_employee(org, employee_id)
    return _commit(store, org, update_employee(employee, org))


@router.put(
    "/employees/{employee_id}/evaluator",
    response_model=MutationResponse,
    response_model_exclude_none=True,
)
async def change_evaluator(
    employee_id: str,
    request: EvaluatorOverrideRequest,
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("WRITE")),  # noqa: B008
):
    org = _load(store)
    _require_employee(org, employee_id)
    return _commit(store, org, set_evaluator_override(employee_id, request.evaluator_id, org))


@router.put(
    "/employees/{employee_id}/evaluator-flag",
    response_model=MutationResponse,
    response_model_exclude_none=True,
)
async def change_evaluator_flag(
    employee_id: str,
    request: EvaluatorFlagRequest,
    store: OrganizationStore = Depends(get_store),
    user: UserInfo = Depends(require_permission("WRITE")),  # noqa: B008
):
    org = _load(store)
    _require_employee(org, employee_id)
    return _commit(store, org, set_evaluator_flag(employee_id, request.is_evaluator, org))
