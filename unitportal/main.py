"""
Unit Portal

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy import func, select

from unitportal.config import get_settings
from unitportal.database import init_db, close_db
from unitportal.api.deps import DbSession
from unitportal.api.errors import map_portal_error
from unitportal.api.v1 import router as api_v1_router
from unitportal.api.middleware.rate_limit import RateLimitMiddleware
from unitportal.api.middleware.request_id import RequestIdMiddleware
from unitportal.kernel.errors import PortalError
from unitportal.kernel.models.personnel import Personnel
from unitportal.schemas.common import HealthResponse
from unitportal.logging_config import configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    # Configure logging first
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    # Startup
    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title=settings.project_name,
    description="""
    Unit Portal

    Personnel directory and content portal for a role-playing military unit.

    ## Features

    - **Personnel**: Roster with ranks, positions and time-in-rank promotion flags
    - **Roles**: Guest, user, moderator and admin capabilities
    - **Avatars**: Member-submitted profile images with moderator approval
    - **Awards**: Award catalog with one ledger entry per recipient
    - **News**: Feed with one reaction per member and post
    - **Sections**: Editable divisions, information and charter pages
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# Middleware order: add_middleware stacks innermost-first, so LAST added = OUTERMOST.
_cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",  # Vite default
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestIdMiddleware)

# CORS last = outermost, so 429s and errors carry CORS headers too
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _request_id_headers(request: Request) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return {"X-Request-ID": req_id} if req_id else {}


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Map service errors to their HTTP status."""
    http_exc = map_portal_error(exc)
    logger.info(
        "Request rejected",
        extra={"code": exc.code, "status_code": http_exc.status_code},
    )
    headers = _request_id_headers(request)
    headers.update(http_exc.headers or {})
    return JSONResponse(
        status_code=http_exc.status_code,
        content={"detail": http_exc.detail},
        headers=headers,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    headers = _request_id_headers(request)
    headers.update(exc.headers or {})
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": {"code": "validation_error", "message": "Validation error"},
            "errors": errors,
        },
        headers=_request_id_headers(request),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    req_id = getattr(request.state, "request_id", None)
    if settings.debug:
        detail = {"code": "internal_error", "message": str(exc), "type": type(exc).__name__}
    else:
        detail = {"code": "internal_error", "message": "Internal server error"}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail, "request_id": req_id},
        headers=_request_id_headers(request),
    )


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(db: DbSession):
    """Check application health."""
    result = await db.execute(select(func.count(Personnel.id)))
    personnel = result.scalar() or 0
    return HealthResponse(
        status="ok",
        version=settings.version,
        database="connected",
        personnel=personnel,
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": {
            "v1": settings.api_v1_prefix,
        },
    }


# Mount API v1 routes
app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "unitportal.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
