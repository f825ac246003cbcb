"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.user_api.api.http.app_data import ApplicationDependencies
from src.user_api.api.http.deps import get_app_dependencies, get_user_store
from src.user_api.core.storage.user_storage import UserStore

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Basic health check endpoint - checks if app is running.

    This is a liveness check that returns 200 OK as long as the application
    process is running. It does not check dependencies.
    """
    return {"status": "healthy", "service": "user-api"}


@router.get("/ready", response_model=None)
def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    store: UserStore = Depends(get_user_store),
) -> dict[str, Any] | JSONResponse:
    """Readiness check - validates that the user store can be reached.

    Returns 200 when the store answers, 503 otherwise.
    """
    checks: dict[str, Any] = {}

    if app_deps.database_service is not None:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {"status": "healthy" if db_healthy else "unhealthy"}

    store_healthy = store.is_available()
    checks["user_store"] = {
        "status": "healthy" if store_healthy else "unhealthy",
        "backend": app_deps.backend,
    }

    all_healthy = all(check["status"] == "healthy" for check in checks.values())
    payload = {"status": "ready" if all_healthy else "not_ready", "checks": checks}
    if not all_healthy:
        return JSONResponse(status_code=503, content=payload)
    return payload
