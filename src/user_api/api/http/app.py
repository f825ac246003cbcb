"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from src.user_api.api.http.app_data import ApplicationDependencies
from src.user_api.api.http.error_handlers import register_error_handlers
from src.user_api.api.http.routers.health import router as health_router
from src.user_api.api.http.routers.users import router as users_router
from src.user_api.api.utils.app_startup import configure_logging
from src.user_api.core.services.database.db_session import DbSessionService
from src.user_api.core.storage.user_storage import InMemoryUserStore
from src.user_api.runtime.context import get_config


def build_dependencies() -> ApplicationDependencies:
    """Create the process-wide services for the configured storage backend."""
    config = get_config()
    if config.storage.backend == "database":
        database_service = DbSessionService()
        database_service.create_all()
        return ApplicationDependencies(database_service=database_service)
    return ApplicationDependencies(memory_store=InMemoryUserStore())


async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = build_dependencies()
    logger.info("User store backend: {}", app.state.app_dependencies.backend)


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None and app_dependencies.database_service is not None:
        app_dependencies.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        dependencies: Pre-built services; when omitted they are created from
            the configuration at startup.
    """
    config = get_config()

    app = FastAPI(
        title="User API",
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )
    app.state.app_dependencies = dependencies

    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
        expose_headers=config.app.cors.expose_headers,
    )
    app.middleware("http")(log_requests)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(users_router)

    return app


_startup_config = get_config()
configure_logging(_startup_config.logging, _startup_config.app.environment)
app = create_app()

__all__ = ["app", "create_app", "startup", "shutdown"]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=get_config().app.port,
        log_config=None,
    )
