from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from orgchart.core.config import settings
from orgchart.core.dependencies import get_current_user
from orgchart.models.auth import UserInfo

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(request: Request):
    services: dict[str, str] = {}

    store = getattr(request.app.state, "store", None)
    if store is None:
        services["organization_store"] = "not_configured"
    else:
        try:
            store.load()
            services["organization_store"] = "ok"
        except Exception:
            services["organization_store"] = "error"

    services["jwt"] = "ok" if settings.JWT_SECRET else "not_configured"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/protected")
async def health_protected(user: UserInfo = Depends(get_current_user)):
    return {"status": "ok", "user": user.model_dump()}


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
