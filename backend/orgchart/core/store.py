"""Organization document stores.

A store holds exactly one :class:`Organization` document and replaces it as a
whole on every save. Writers are serialized by a lock; concurrent editors get
last-write-wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from orgchart.core.config import Settings
from orgchart.models.organization import Organization
from orgchart.services.integrity import log_integrity_issues

logger = logging.getLogger(__name__)


class OrganizationStoreError(Exception):
    pass


def default_organization() -> Organization:
    """Demo organization used when no data file is available."""
    return Organization.from_document(
        {
            "id": "org-001",
            "name": "組織図管理アプリ（デモ）",
            "departments": [
                {
                    "id": "dept-001",
                    "name": "サンプル本部",
                    "manager": "サンプル本部長",
                    "managerId": "emp-001",
                    "sections": [
                        {
                            "id": "sect-001",
                            "name": "サンプル部",
                            "manager": "サンプル部長",
                            "managerId": "emp-002",
                            "courses": [
                                {
                                    "id": "course-001",
                                    "name": "サンプル課",
                                    "manager": "山田太郎",
                                    "managerId": "emp-003",
                                }
                            ],
                        }
                    ],
                }
            ],
            "employees": [
                {
                    "id": "emp-001",
                    "name": "サンプル本部長",
                    "position": "本部長",
                    "department": "サンプル本部",
                    "section": "",
                    "email": "demo@example.com",
                    "phone": "000-0000-0000",
                    "employeeId": "D001",
                    "joinDate": "2020-04-01",
                    "birthDate": "1980-01-01",
                    "qualificationGrade": "SA",
                },
                {
                    "id": "emp-002",
                    "name": "サンプル部長",
                    "position": "部長",
                    "department": "サンプル本部",
                    "section": "サンプル部",
                    "email": "demo2@example.com",
                    "phone": "000-0000-0001",
                    "employeeId": "D002",
                    "joinDate": "2021-04-01",
                    "birthDate": "1985-01-01",
                    "qualificationGrade": "S3",
                },
                {
                    "id": "emp-003",
                    "name": "山田太郎",
                    "position": "課長",
                    "department": "サンプル本部",
                    "section": "サンプル部",
                    "course": "サンプル課",
                    "email": "yamada@example.com",
                    "phone": "000-0000-0002",
                    "employeeId": "D003",
                    "joinDate": "2022-04-01",
                    "birthDate": "1990-01-01",
                    "qualificationGrade": "G1",
                },
                {
                    "id": "emp-004",
                    "name": "佐藤花子",
                    "position": "一般職",
                    "department": "サンプル本部",
                    "section": "サンプル部",
                    "course": "サンプル課",
                    "email": "sato@example.com",
                    "phone": "000-0000-0003",
                    "employeeId": "D004",
                    "joinDate": "2023-04-01",
                    "birthDate": "1995-01-01",
                    "qualificationGrade": "G3",
                },
                {
                    "id": "emp-005",
                    "name": "鈴木次郎",
                    "position": "一般職",
                    "department": "サンプル本部",
                    "section": "サンプル部",
                    "course": "サンプル課",
                    "email": "suzuki@example.com",
                    "phone": "000-0000-0004",
                    "employeeId": "D005",
                    "joinDate": "2023-10-01",
                    "birthDate": "1992-01-01",
                    "qualificationGrade": "G3",
                },
            ],
        }
    )


def read_organization_file(path: Path) -> Organization:
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise OrganizationStoreError(f"Could not read {path}: {e}") from e
    try:
        return Organization.from_document(document)
    except ValidationError as e:
        raise OrganizationStoreError(f"Invalid organization document in {path}: {e}") from e


class OrganizationStore(ABC):
    def __init__(self) -> None:
        self._lock = threading.Lock()

    def load(self) -> Organization:
        with self._lock:
            return self._load()

    def save(self, org: Organization) -> None:
        with self._lock:
            self._save(org)
        logger.info("Organization %s saved (%d employees)", org.id, len(org.employees))

    @abstractmethod
    def _load(self) -> Organization: ...

    @abstractmethod
    def _save(self, org: Organization) -> None: ...


class InMemoryOrganizationStore(OrganizationStore):
    """Keeps the document in process memory; changes are lost on restart."""

    def __init__(self, initial: Organization) -> None:
        super().__init__()
        self._org = initial

    def _load(self) -> Organization:
        return self._org

    def _save(self, org: Organization) -> None:
        self._org = org


class JsonFileOrganizationStore(OrganizationStore):
    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path

    def _load(self) -> Organization:
        return read_organization_file(self.path)

    def _save(self, org: Organization) -> None:
        payload = json.dumps(org.to_document(), ensure_ascii=False, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise OrganizationStoreError(f"Could not write {self.path}: {e}") from e


def build_store(settings: Settings) -> OrganizationStore:
    path = Path(settings.ORGANIZATION_DATA_FILE)

    if settings.ORGANIZATION_STORE == "file":
        if not path.exists():
            logger.warning("Organization file %s missing; seeding it with demo data", path)
            store = JsonFileOrganizationStore(path)
            store.save(default_organization())
            return store
        store = JsonFileOrganizationStore(path)
        log_integrity_issues(store.load())
        logger.info("Using file organization store (%s)", path)
        return store

    if settings.ORGANIZATION_STORE != "memory":
        raise OrganizationStoreError(f"Unknown ORGANIZATION_STORE: {settings.ORGANIZATION_STORE}")

    if path.exists():
        initial = read_organization_file(path)
    else:
        logger.warning("Organization file %s missing; using demo data", path)
        initial = default_organization()
    log_integrity_issues(initial)
    logger.info("Using in-memory organization store (%s)", initial.id)
    return InMemoryOrganizationStore(initial)
