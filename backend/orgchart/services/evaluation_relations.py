"""Evaluator resolution and evaluator -> evaluatee aggregation.

Every consumer that needs "who evaluates whom" goes through
:class:`HierarchyIndex`. It walks the placement chain of an employee
(course -> section -> department) and returns the first manager that is not
the employee themself, unless an explicit ``evaluatorId`` override applies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from orgchart.models.organization import (
    Course,
    Department,
    DepartmentDirect,
    Employee,
    Organization,
    Section,
    SectionDirect,
)

logger = logging.getLogger(__name__)

Unit = Department | Section | Course


@dataclass
class EvaluationRelation:
    evaluator: Employee | None = None
    evaluatee_count: int = 0


class HierarchyIndex:
    """Lookup tables for one organization snapshot.

    Built in O(D + S + C + E); each resolution afterwards is O(1).
    """

    def __init__(self, org: Organization) -> None:
        self.org = org
        self.employees: dict[str, Employee] = {}
        for employee in org.employees:
            self.employees.setdefault(employee.id, employee)

        self.departments: dict[str, Department] = {}
        self.sections: dict[tuple[str, str], Section] = {}
        self.courses: dict[tuple[str, str, str], Course] = {}
        self.managed_units: dict[str, list[Unit]] = {}

        for dept in org.departments:
            self.departments.setdefault(dept.name, dept)
            self._register_manager(dept)
            for section in dept.sections:
                self.sections.setdefault((dept.name, section.name), section)
                self._register_manager(section)
                for course in section.courses:
                    self.courses.setdefault((dept.name, section.name, course.name), course)
                    self._register_manager(course)

    def _register_manager(self, unit: Unit) -> None:
        if unit.manager_id:
            self.managed_units.setdefault(unit.manager_id, []).append(unit)

    def unit_chain(self, employee: Employee) -> list[Unit] | None:
        """Units containing ``employee``, innermost first.

        ``None`` when the placement names a unit missing from the tree.
        """
        placement = employee.placement
        dept = self.departments.get(placement.department)
        if dept is None:
            return None
        if isinstance(placement, DepartmentDirect):
            return [dept]

        section = self.sections.get((placement.department, placement.section))
        if section is None:
            return None
        if isinstance(placement, SectionDirect):
            return [section, dept]

        course = self.courses.get((placement.department, placement.section, placement.course))
        if course is None:
            return None
        return [course, section, dept]

    def target_unit(self, department: str, section: str, course: str | None) -> Unit | None:
        if not section:
            return self.departments.get(department)
        if not course:
            return self.sections.get((department, section))
        return self.courses.get((department, section, course))

    def is_manager(self, employee_id: str) -> bool:
        return employee_id in self.managed_units

    def resolve(self, employee: Employee) -> str | None:
        if employee.evaluator_id and employee.evaluator_id != employee.id:
            if employee.evaluator_id in self.employees:
                return employee.evaluator_id
            return None

        chain = self.unit_chain(employee)
        if chain is None:
            return None

        for unit in chain:
            candidate = unit.manager_id
            # Vacant posts and the employee's own post defer to the containing unit.
            if not candidate or candidate == employee.id:
                continue
            if candidate not in self.employees:
                logger.debug("Dangling managerId %s on unit %s", candidate, unit.id)
                return None
            return candidate
        return None

    def resolve_employee(self, employee: Employee) -> Employee | None:
        evaluator_id = self.resolve(employee)
        if evaluator_id is None:
            return None
        return self.employees[evaluator_id]


def resolve_evaluator(employee: Employee, org: Organization) -> str | None:
    """Return the effective evaluator id of ``employee`` within ``org``.

    Resolving many employees? Build a :class:`HierarchyIndex` once instead.
    """
    return HierarchyIndex(org).resolve(employee)


def build_evaluation_map(
    org: Organization,
    index: HierarchyIndex | None = None,
) -> dict[str, EvaluationRelation]:
    if index is None:
        index = HierarchyIndex(org)

    relations = {employee.id: EvaluationRelation() for employee in org.employees}
    for employee in org.employees:
        evaluator = index.resolve_employee(employee)
        relations[employee.id].evaluator = evaluator
        if evaluator is not None:
            relations[evaluator.id].evaluatee_count += 1
    return relations


def select_direct_reports(
    evaluator_id: str,
    org: Organization,
    relations: dict[str, EvaluationRelation],
) -> list[Employee]:
    reports: list[Employee] = []
    for employee in org.employees:
        evaluator = relations[employee.id].evaluator
        if evaluator is not None and evaluator.id == evaluator_id:
            reports.append(employee)
    return reports


def get_direct_reports(evaluator_id: str, org: Organization) -> list[Employee]:
    return select_direct_reports(evaluator_id, org, build_evaluation_map(org))


def evaluator_candidates(org: Organization, index: HierarchyIndex | None = None) -> list[Employee]:
    """Employees selectable as an evaluator override.

    An explicit ``isEvaluator`` flag wins; otherwise anyone managing a unit.
    """
    if index is None:
        index = HierarchyIndex(org)
    candidates: list[Employee] = []
    for employee in org.employees:
        if employee.is_evaluator is not None:
            if employee.is_evaluator:
                candidates.append(employee)
        elif index.is_manager(employee.id):
            candidates.append(employee)
    return candidates
