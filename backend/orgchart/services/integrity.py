"""Data-integrity checks for an organization document."""

from __future__ import annotations

import logging

from orgchart.models.organization import Organization
from orgchart.models.report import IntegrityIssue
from orgchart.services.evaluation_relations import HierarchyIndex

logger = logging.getLogger(__name__)


def find_integrity_issues(org: Organization) -> list[IntegrityIssue]:
    index = HierarchyIndex(org)
    issues: list[IntegrityIssue] = []

    seen: set[str] = set()
    for employee in org.employees:
        if employee.id in seen:
            issues.append(
                IntegrityIssue(
                    kind="duplicate_employee",
                    subject_id=employee.id,
                    message=f"Employee id {employee.id} appears more than once",
                )
            )
        seen.add(employee.id)

    for dept in org.departments:
        units = [dept]
        for section in dept.sections:
            units.append(section)
            units.extend(section.courses)
        for unit in units:
            if unit.manager_id and unit.manager_id not in index.employees:
                issues.append(
                    IntegrityIssue(
                        kind="dangling_manager",
                        subject_id=unit.id,
                        reference=unit.manager_id,
                        message=f"{unit.name} is managed by unknown employee {unit.manager_id}",
                    )
                )

    for employee in org.employees:
        if employee.evaluator_id == employee.id:
            issues.append(
                IntegrityIssue(
                    kind="self_evaluator",
                    subject_id=employee.id,
                    reference=employee.evaluator_id,
                    message=f"{employee.name} is set as their own evaluator",
                )
            )
        elif employee.evaluator_id and employee.evaluator_id not in index.employees:
            issues.append(
                IntegrityIssue(
                    kind="dangling_evaluator",
                    subject_id=employee.id,
                    reference=employee.evaluator_id,
                    message=f"{employee.name} has unknown evaluator {employee.evaluator_id}",
                )
            )

        if index.unit_chain(employee) is None:
            where = "/".join(p for p in (employee.department, employee.section, employee.course) if p)
            issues.append(
                IntegrityIssue(
                    kind="unknown_placement",
                    subject_id=employee.id,
                    reference=where,
                    message=f"{employee.name} is placed in unknown unit {where}",
                )
            )

    return issues


def log_integrity_issues(org: Organization) -> list[IntegrityIssue]:
    issues = find_integrity_issues(org)
    for issue in issues:
        logger.warning("Data integrity (%s): %s", issue.kind, issue.message)
    return issues
