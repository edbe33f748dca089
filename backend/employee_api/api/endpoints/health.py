from __future__ import annotations

from fastapi import APIRouter

from employee_api.core.config import settings
from employee_api.services.employee_service import employee_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    try:
        if employee_service.client is not None:
            ok = await employee_service.check_connection()
            services["mongodb"] = "ok" if ok else "error"
        else:
            services["mongodb"] = "not_configured"
    except Exception:
        services["mongodb"] = "error"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
