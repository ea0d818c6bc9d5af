"""Headcount breakdowns for the analytics view."""

from __future__ import annotations

from collections import Counter
from datetime import date

from orgchart.models.organization import Organization
from orgchart.models.report import CountEntry, OrganizationSummary
from orgchart.services.employee_search import GRADE_ORDER

UNSET_GRADE = "未設定"
AGE_GROUPS = ["20代", "30代", "40代", "50代", "60代以上"]


def _age_group(birth_date: str, today: date) -> str | None:
    try:
        birth_year = int(birth_date[:4])
    except ValueError:
        return None
    age = today.year - birth_year
    if age < 30:
        return AGE_GROUPS[0]
    if age < 40:
        return AGE_GROUPS[1]
    if age < 50:
        return AGE_GROUPS[2]
    if age < 60:
        return AGE_GROUPS[3]
    return AGE_GROUPS[4]


def summarize_organization(org: Organization, today: date | None = None) -> OrganizationSummary:
    today = today or date.today()
    employees = org.employees

    per_department = Counter(e.department for e in employees)
    departments = [CountEntry(label=d.name, count=per_department.get(d.name, 0)) for d in org.departments]

    grades = Counter(e.qualification_grade for e in employees)
    qualification_grades = [CountEntry(label=g, count=grades.get(g, 0)) for g in GRADE_ORDER]
    if grades.get(None):
        qualification_grades.append(CountEntry(label=UNSET_GRADE, count=grades[None]))

    ages = Counter(g for g in (_age_group(e.birth_date, today) for e in employees) if g)
    age_groups = [CountEntry(label=g, count=ages.get(g, 0)) for g in AGE_GROUPS]

    years = Counter(e.join_date[:4] for e in employees if e.join_date)
    join_years = [CountEntry(label=y, count=n) for y, n in sorted(years.items())]

    positions = [
        CountEntry(label=p, count=n)
        for p, n in sorted(Counter(e.position for e in employees).items(), key=lambda item: -item[1])
    ]

    return OrganizationSummary(
        employee_count=len(employees),
        department_count=len(org.departments),
        section_count=sum(len(d.sections) for d in org.departments),
        course_count=sum(len(s.courses) for d in org.departments for s in d.sections),
        departments=departments,
        qualification_grades=qualification_grades,
        age_groups=age_groups,
        join_years=join_years,
        positions=positions,
    )
