"""JWT authentication: token issuance, validation and role permissions."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import HTTPException, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from orgchart.models.auth import Permission, Role

logger = logging.getLogger("orgchart_auth")

ROLE_PERMISSIONS: dict[str, list[Permission]] = {
    "ADMIN": ["READ", "WRITE", "DELETE"],
    "EDITOR": ["READ", "WRITE"],
    "VIEWER": ["READ"],
}


def permissions_for_role(role: str) -> list[Permission]:
    return list(ROLE_PERMISSIONS.get(role, []))


def create_access_token(
    subject: str,
    role: Role,
    secret: str,
    *,
    name: str | None = None,
    email: str | None = None,
    algorithm: str = "HS256",
    expires_in: timedelta = timedelta(hours=8),
) -> str:
    if not secret:
        raise ValueError("JWT secret must not be empty")

    now = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    if name:
        claims["name"] = name
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm=algorithm)


def validate_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Missing JWT configuration",
        )

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is expired",
        ) from e
    except (JWTClaimsError, JWTError) as e:
        logger.info("Rejected token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        ) from e

    if payload.get("role") not in ROLE_PERMISSIONS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token carries an unknown role",
        )
    return payload
