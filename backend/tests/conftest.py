from __future__ import annotations

from datetime import timedelta
from typing import Any

import pytest
from starlette.testclient import TestClient

from orgchart.core.auth import create_access_token, permissions_for_role
from orgchart.core.dependencies import get_current_user
from orgchart.core.store import InMemoryOrganizationStore
from orgchart.main import app
from orgchart.models.auth import UserInfo
from orgchart.models.organization import Employee, Organization

TEST_JWT_SECRET = "test-secret-0000000000000000000000000000"


def make_employee(
    employee_id: str,
    department: str,
    section: str = "",
    course: str | None = None,
    **fields: Any,
) -> Employee:
    data: dict[str, Any] = {
        "id": employee_id,
        "name": fields.pop("name", f"Name {employee_id}"),
        "position": fields.pop("position", "一般社員"),
        "department": department,
        "section": section,
        "email": f"{employee_id}@example.com",
        "phone": "000-0000-0000",
        "employeeId": employee_id.upper(),
        "joinDate": "2020-04-01",
        "birthDate": "1990-01-01",
    }
    if course is not None:
        data["course"] = course
    data.update(fields)
    return Employee.model_validate(data)


def build_sample_organization() -> Organization:
    """Two departments.

    Sales (m1) > SalesSec (m2) > Field (m3)
    Tech (m5) > Platform (vacant) > Infra (m6)
    """
    departments = [
        {
            "id": "d-sales",
            "name": "Sales",
            "manager": "Name m1",
            "managerId": "m1",
            "sections": [
                {
                    "id": "s-sales",
                    "name": "SalesSec",
                    "manager": "Name m2",
                    "managerId": "m2",
                    "courses": [
                        {"id": "c-field", "name": "Field", "manager": "Name m3", "managerId": "m3"},
                    ],
                }
            ],
        },
        {
            "id": "d-tech",
            "name": "Tech",
            "manager": "Name m5",
            "managerId": "m5",
            "sections": [
                {
                    "id": "s-platform",
                    "name": "Platform",
                    "manager": "",
                    "managerId": "",
                    "courses": [
                        {"id": "c-infra", "name": "Infra", "manager": "Name m6", "managerId": "m6"},
                    ],
                }
            ],
        },
    ]
    employees = [
        make_employee("m1", "Sales", position="本部長", qualificationGrade="SA"),
        make_employee("m2", "Sales", "SalesSec", position="部長", qualificationGrade="S3"),
        make_employee("m3", "Sales", "SalesSec", "Field", position="課長", qualificationGrade="C1"),
        make_employee("e1", "Sales", "SalesSec", "", qualificationGrade="G3"),
        make_employee("e2", "Sales", "SalesSec", "Field", qualificationGrade="G2"),
        make_employee("e3", "Sales", "SalesSec"),
        make_employee("e4", "Sales", position="本部アシスタント"),
        make_employee("m5", "Tech", position="本部長", qualificationGrade="S4"),
        make_employee("m6", "Tech", "Platform", "Infra", position="課長"),
        make_employee("e6", "Tech", "Platform", "Infra", position="エンジニア"),
        make_employee("e7", "Tech", "Platform", position="エンジニア"),
        make_employee("e8", "Sales", "SalesSec", "Field", evaluatorId="m5"),
    ]
    return Organization.model_validate(
        {
            "id": "org-test",
            "name": "Test Org",
            "departments": departments,
            "employees": [e.model_dump(by_alias=True, exclude_none=True) for e in employees],
        }
    )


def make_token(role: str = "ADMIN", *, subject: str = "user-1", expired: bool = False) -> str:
    return create_access_token(
        subject,
        role,  # type: ignore[arg-type]
        TEST_JWT_SECRET,
        name="Test User",
        email="test@example.com",
        expires_in=timedelta(hours=-1) if expired else timedelta(hours=1),
    )


@pytest.fixture(autouse=True)
def _auth_settings():
    from orgchart.core.config import settings

    original_secret = settings.JWT_SECRET
    settings.JWT_SECRET = TEST_JWT_SECRET
    yield
    settings.JWT_SECRET = original_secret


@pytest.fixture
def sample_org() -> Organization:
    return build_sample_organization()


@pytest.fixture
def store(sample_org):
    return InMemoryOrganizationStore(sample_org)


@pytest.fixture
def client(store):
    app.state.store = store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    app.state.store = None


def _user(role: str) -> UserInfo:
    return UserInfo(
        id=f"{role.lower()}-1",
        name=f"{role.title()} User",
        email=f"{role.lower()}@example.com",
        role=role,  # type: ignore[arg-type]
        permissions=permissions_for_role(role),
    )


@pytest.fixture
def mock_user_admin():
    return _user("ADMIN")


@pytest.fixture
def mock_user_editor():
    return _user("EDITOR")


@pytest.fixture
def mock_user_viewer():
    return _user("VIEWER")


@pytest.fixture
def authenticated_client(client, mock_user_admin):
    app.dependency_overrides[get_current_user] = lambda: mock_user_admin
    yield client


@pytest.fixture
def viewer_client(client, mock_user_viewer):
    app.dependency_overrides[get_current_user] = lambda: mock_user_viewer
    yield client
