"""FastAPI application for Louisiana Plumber Prep."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from plumbprep.config import configure_logging, get_settings
from plumbprep.database import dispose_engine, initialize_database
from plumbprep.exceptions import PlumbPrepError
from plumbprep.routers import (
    achievements,
    admin,
    affiliate,
    auth,
    beta,
    bulk_enrollment,
    calculator,
    courses,
    employers,
    jobs,
    mentor,
    notifications,
    pricing,
    progress,
    referrals,
    settings as settings_router,
    store,
    study_sessions,
    subscriptions,
    users,
)

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.ENVIRONMENT)
    initialize_database(settings)
    logger.info(
        "application_started",
        environment=settings.ENVIRONMENT,
        ai_enabled=settings.ai_enabled,
        billing_enabled=settings.billing_enabled,
    )

    yield

    dispose_engine()
    logger.info("application_stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Louisiana plumbing certification prep: courses, quizzes, job board and store",
    version=settings.VERSION,
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    lifespan=lifespan,
)

app.state.limiter = auth.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PlumbPrepError)
async def plumbprep_error_handler(request: Request, exc: PlumbPrepError) -> JSONResponse:
    """Render domain errors as ``{"detail": ...}`` plus any flags the error carries."""
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, **exc.extra},
    )


@app.get("/", tags=["health"])
async def root() -> dict[str, str]:
    return {"message": "Welcome to Louisiana Plumber Prep API"}


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@app.get(f"{settings.API_V1_PREFIX}/", tags=["health"])
async def api_root() -> dict[str, str]:
    return {
        "message": "Louisiana Plumber Prep API v1",
        "version": settings.VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
    }


for module in (
    auth,
    users,
    settings_router,
    subscriptions,
    referrals,
    courses,
    progress,
    study_sessions,
    jobs,
    employers,
    admin,
    notifications,
    store,
    affiliate,
    mentor,
    pricing,
    beta,
    calculator,
    achievements,
    bulk_enrollment,
):
    app.include_router(module.router, prefix=settings.API_V1_PREFIX)
