import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from starlette.middleware.base import RequestResponseEndpoint

from src.searchmatic.api.v1.router import api_router
from src.searchmatic.core.config import Settings, get_settings
from src.searchmatic.core.db import dispose_engine, get_session
from src.searchmatic.core.exceptions import setup_exception_handlers
from src.searchmatic.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from src.searchmatic.core.redis import close_redis, get_redis
from src.searchmatic.core.shutdown import in_flight
from src.searchmatic.repositories import EnumValueRepository
from src.searchmatic.services import EnumRegistryService, get_enum_registry

logger = get_logger(__name__)

# Probes and scrapes are neither counted for draining nor refused while draining
UNTRACKED_PATHS = frozenset({"/health", "/metrics"})


async def load_enum_registry() -> None:
    """Merge values registered by earlier deployments into the process registry."""
    async with get_session() as session:
        service = EnumRegistryService(EnumValueRepository(session), session, get_enum_registry())
        await service.load()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting", app=settings.app_name, env=settings.app_env)

    await load_enum_registry()

    yield

    drained = await in_flight.drain(timeout=settings.shutdown_grace_period)
    logger.info("Releasing connections", drained=drained)
    await close_redis()
    await dispose_engine()
    logger.info("Stopped")


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    @app.middleware("http")
    async def request_context(request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Bind request_id to the log context and track the request for draining."""
        clear_request_context()
        bind_request_context(correlation_id.get())
        try:
            if request.url.path in UNTRACKED_PATHS:
                return await call_next(request)
            if in_flight.draining:
                return JSONResponse(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    content={
                        "detail": "Service is shutting down",
                        "request_id": correlation_id.get(),
                    },
                )
            in_flight.enter()
            try:
                return await call_next(request)
            finally:
                in_flight.leave()
        finally:
            clear_request_context()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID", "X-Admin-Key"],
    )
    # Added last so it runs first and the id exists for everything below it
    app.add_middleware(CorrelationIdMiddleware)


def _expose_metrics(app: FastAPI, settings: Settings) -> None:
    instrumentator = Instrumentator(excluded_handlers=["/metrics"]).instrument(app)
    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics", include_in_schema=False)
        return

    expected = settings.metrics_api_key
    metrics_key = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def require_metrics_key(api_key: str | None = Depends(metrics_key)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(
        app,
        endpoint="/metrics",
        include_in_schema=False,
        dependencies=[Depends(require_metrics_key)],
    )


async def check_health() -> tuple[int, dict[str, Any]]:
    """Probe the database (required) and Redis (optional, only backs the stats cache)."""
    report: dict[str, Any] = {
        "status": "healthy",
        "database": "unknown",
        "redis": "not_configured",
    }

    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
        report["database"] = "healthy"
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        report["database"] = f"unhealthy: {e}"
        report["status"] = "unhealthy"

    redis = await get_redis()
    if redis is not None:
        try:
            await redis.ping()  # type: ignore[misc]
            report["redis"] = "healthy"
        except Exception as e:
            report["redis"] = f"unhealthy: {e}"
            if report["status"] == "healthy":
                report["status"] = "degraded"

    if report["status"] == "healthy":
        return status.HTTP_200_OK, report
    return status.HTTP_503_SERVICE_UNAVAILABLE, report


OPENAPI_TAGS = [
    {"name": "projects", "description": "Review projects and their statistics"},
    {"name": "studies", "description": "Studies tracked within a project"},
    {"name": "enums", "description": "Registered project/study types and statuses"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Systematic literature review projects and studies",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    _add_middleware(app, settings)
    app.include_router(api_router)
    _expose_metrics(app, settings)

    @app.get("/health", include_in_schema=False)
    async def health() -> JSONResponse:
        code, report = await check_health()
        return JSONResponse(content=report, status_code=code)

    return app


app = create_app()
