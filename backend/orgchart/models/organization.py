"""Organization chart models: departments, sections, courses and employees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

QualificationGrade = Literal[
    "SA", "S4", "S3", "S2", "S1", "C3", "C2", "C1", "G1", "G2", "G3", "E3", "E2", "E1"
]


@dataclass(frozen=True)
class DepartmentDirect:
    """Reports straight to the department (``section == ""``)."""

    department: str


@dataclass(frozen=True)
class SectionDirect:
    """Belongs to a section without a course."""

    department: str
    section: str


@dataclass(frozen=True)
class CourseMember:
    department: str
    section: str
    course: str


Placement = Union[DepartmentDirect, SectionDirect, CourseMember]


def classify_placement(department: str, section: str, course: str | None) -> Placement:
    """Map the flat wire fields onto a placement tier.

    An empty section always means department-direct, whatever ``course`` holds.
    """
    if not section:
        return DepartmentDirect(department)
    if not course:
        return SectionDirect(department, section)
    return CourseMember(department, section, course)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Course(_CamelModel):
    id: str
    name: str
    manager: str = ""
    manager_id: str = Field("", alias="managerId")


class Section(_CamelModel):
    id: str
    name: str
    manager: str = ""
    manager_id: str = Field("", alias="managerId")
    courses: list[Course] = []


class Department(_CamelModel):
    id: str
    name: str
    manager: str = ""
    manager_id: str = Field("", alias="managerId")
    sections: list[Section] = []


class Employee(_CamelModel):
    id: str
    name: str
    position: str = ""
    department: str
    section: str = ""
    course: str | None = None
    email: str = ""
    phone: str = ""
    employee_id: str = Field("", alias="employeeId")
    join_date: str = Field("", alias="joinDate")
    birth_date: str = Field("", alias="birthDate")
    qualification_grade: QualificationGrade | None = Field(None, alias="qualificationGrade")
    evaluator_id: str | None = Field(None, alias="evaluatorId")
    evaluator: str | None = None
    is_evaluator: bool | None = Field(None, alias="isEvaluator")

    @property
    def placement(self) -> Placement:
        return classify_placement(self.department, self.section, self.course)


class Organization(_CamelModel):
    id: str
    name: str
    departments: list[Department] = []
    employees: list[Employee] = []

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Organization:
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Dump in the persisted JSON shape; absent optional fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def find_employee(self, employee_id: str) -> Employee | None:
        return next((e for e in self.employees if e.id == employee_id), None)

    def replace_employee(self, employee: Employee) -> Organization:
        employees = [employee if e.id == employee.id else e for e in self.employees]
        return self.model_copy(update={"employees": employees})
