"""Copy-on-write edits to an organization snapshot.

Every function returns a new :class:`Organization` (or the input itself when the
edit is rejected or has no effect) and never mutates its arguments. Rejected
edits are logged, not raised.
"""

from __future__ import annotations

import logging

from orgchart.models.organization import Employee, Organization
from orgchart.services.evaluation_relations import HierarchyIndex

logger = logging.getLogger(__name__)


def _same_placement(employee: Employee, department: str, section: str, course: str | None) -> bool:
    return (
        employee.department == department
        and employee.section == section
        and (employee.course or "") == (course or "")
    )


def _with_evaluator_name(employee: Employee, org: Organization) -> Employee:
    evaluator = HierarchyIndex(org).resolve_employee(employee)
    return employee.model_copy(update={"evaluator": evaluator.name if evaluator else None})


def move_employee(
    employee: Employee,
    target_department: str,
    target_section: str,
    target_course: str | None,
    org: Organization,
    *,
    preserve_override: bool = False,
) -> Organization:
    """Place ``employee`` into another department / section / course.

    The evaluator override is cleared unless ``preserve_override`` is set, and
    the ``evaluator`` display name is recomputed for the new placement.
    """
    index = HierarchyIndex(org)
    current = index.employees.get(employee.id)
    if current is None:
        logger.warning("Move ignored: employee %s not in organization %s", employee.id, org.id)
        return org

    if _same_placement(current, target_department, target_section, target_course):
        logger.debug("Move of %s ignored: already in target placement", employee.id)
        return org

    target = index.target_unit(target_department, target_section, target_course)
    if target is None:
        logger.warning(
            "Move of %s ignored: unknown target %s/%s/%s",
            employee.id,
            target_department,
            target_section,
            target_course or "",
        )
        return org

    if target.manager_id == employee.id:
        logger.info("Move of %s ignored: employee manages target unit %s", employee.id, target.id)
        return org

    update: dict[str, object] = {
        "department": target_department,
        "section": target_section,
        "course": target_course if target_section and target_course else None,
    }
    if not preserve_override:
        update["evaluator_id"] = None
    moved = current.model_copy(update=update)

    updated = org.replace_employee(moved)
    moved = _with_evaluator_name(moved, updated)
    logger.info(
        "Moved %s to %s/%s/%s",
        employee.id,
        target_department,
        target_section,
        target_course or "",
    )
    return updated.replace_employee(moved)


def set_evaluator_override(
    employee_id: str,
    evaluator_id: str | None,
    org: Organization,
) -> Organization:
    """Set or clear (``evaluator_id=None``) an explicit evaluator."""
    employee = org.find_employee(employee_id)
    if employee is None:
        logger.warning("Evaluator override ignored: employee %s not found", employee_id)
        return org

    if evaluator_id == employee_id:
        logger.warning("Evaluator override ignored: %s cannot evaluate themself", employee_id)
        return org

    if evaluator_id is not None and org.find_employee(evaluator_id) is None:
        logger.warning(
            "Evaluator override ignored: evaluator %s for %s not found",
            evaluator_id,
            employee_id,
        )
        return org

    if employee.evaluator_id == evaluator_id:
        return org

    updated = org.replace_employee(employee.model_copy(update={"evaluator_id": evaluator_id}))
    changed = _with_evaluator_name(updated.find_employee(employee_id), updated)
    return updated.replace_employee(changed)


def set_evaluator_flag(employee_id: str, is_evaluator: bool | None, org: Organization) -> Organization:
    employee = org.find_employee(employee_id)
    if employee is None:
        logger.warning("Evaluator flag ignored: employee %s not found", employee_id)
        return org
    if employee.is_evaluator == is_evaluator:
        return org
    return org.replace_employee(employee.model_copy(update={"is_evaluator": is_evaluator}))


def _rename_references(org: Organization, employee_id: str, name: str) -> Organization:
    """Rewrite the cached ``manager`` and ``evaluator`` names that point at ``employee_id``."""

    def _unit(unit):
        return unit.model_copy(update={"manager": name}) if unit.manager_id == employee_id else unit

    departments = [
        _unit(dept).model_copy(
            update={
                "sections": [
                    _unit(section).model_copy(update={"courses": [_unit(c) for c in section.courses]})
                    for section in dept.sections
                ]
            }
        )
        for dept in org.departments
    ]
    renamed = org.model_copy(update={"departments": departments})

    index = HierarchyIndex(renamed)
    employees: list[Employee] = []
    for employee in renamed.employees:
        evaluator = index.resolve_employee(employee)
        if evaluator is not None and evaluator.id == employee_id:
            employee = employee.model_copy(update={"evaluator": evaluator.name})
        employees.append(employee)
    return renamed.model_copy(update={"employees": employees})


def update_employee(updated: Employee, org: Organization) -> Organization:
    """Replace an employee's record, e.g. after an edit form is saved.

    A changed placement goes through :func:`move_employee` so the evaluator is
    recomputed the same way as a drag and drop. An override is checked like
    :func:`set_evaluator_override`; a rejected one keeps the stored override.
    A changed name is propagated to unit managers and evaluator display names.
    """
    current = org.find_employee(updated.id)
    if current is None:
        logger.warning("Update ignored: employee %s not found", updated.id)
        return org

    if updated.evaluator_id == updated.id:
        logger.warning("Update of %s drops a self-referencing evaluator override", updated.id)
        updated = updated.model_copy(update={"evaluator_id": None})
    elif updated.evaluator_id is not None and org.find_employee(updated.evaluator_id) is None:
        logger.warning(
            "Update of %s ignores unknown evaluator %s",
            updated.id,
            updated.evaluator_id,
        )
        updated = updated.model_copy(update={"evaluator_id": current.evaluator_id})

    moving = not _same_placement(current, updated.department, updated.section, updated.course)
    placed_at_current = updated.model_copy(
        update={"department": current.department, "section": current.section, "course": current.course}
    )
    result = org.replace_employee(placed_at_current)

    moved = result
    if moving:
        keep_override = updated.evaluator_id is not None and updated.evaluator_id != current.evaluator_id
        moved = move_employee(
            placed_at_current,
            updated.department,
            updated.section,
            updated.course,
            result,
            preserve_override=keep_override,
        )
        if moved is result:
            logger.warning("Update of %s kept its previous placement", updated.id)

    if moved is result:
        refreshed = _with_evaluator_name(result.find_employee(updated.id), result)
        moved = result.replace_employee(refreshed)

    if updated.name != current.name:
        moved = _rename_references(moved, updated.id, updated.name)
    return moved
