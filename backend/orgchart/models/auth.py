"""Authentication models for organization JWT tokens."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

Role = Literal["ADMIN", "EDITOR", "VIEWER"]
Permission = Literal["READ", "WRITE", "DELETE"]


class TokenPayload(BaseModel):
    sub: str
    name: str | None = None
    email: str | None = None
    role: Role = "VIEWER"


class UserInfo(BaseModel):
    id: str | None = None
    name: str | None = None
    email: str | None = None
    role: Role = "VIEWER"
    permissions: list[Permission] = []

    def can(self, permission: Permission) -> bool:
        return permission in self.permissions
