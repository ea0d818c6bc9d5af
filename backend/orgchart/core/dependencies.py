from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, Request, status

from orgchart.core.auth import permissions_for_role, validate_token
from orgchart.core.config import settings
from orgchart.core.store import OrganizationStore
from orgchart.models.auth import Permission, TokenPayload, UserInfo

logger = logging.getLogger(__name__)


async def get_current_user(authorization: str | None = Header(None)) -> UserInfo:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1]

    try:
        payload = validate_token(token, settings.JWT_SECRET, settings.JWT_ALGORITHM)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    claims = TokenPayload.model_validate(payload)
    return UserInfo(
        id=claims.sub,
        name=claims.name,
        email=claims.email,
        role=claims.role,
        permissions=permissions_for_role(claims.role),
    )


def require_permission(permission: Permission):
    async def _check_permission(user: UserInfo = Depends(get_current_user)) -> UserInfo:
        if not user.can(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {permission}",
            )
        return user

    return _check_permission


def get_store(request: Request) -> OrganizationStore:
    store: OrganizationStore | None = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Organization store not initialized",
        )
    return store
