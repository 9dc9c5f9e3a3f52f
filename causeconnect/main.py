"""
FastAPI Application Entry Point

This module initializes the FastAPI application with:
- CORS configuration
- Middleware setup
- Route registration
- Error handlers rendering {message, status, errors?}
- Health check endpoints
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from causeconnect import __version__
from causeconnect.core.config import settings
from causeconnect.core.exceptions import AppError
from causeconnect.db.database import check_db_connection
from causeconnect.db.redis import (
    check_redis_connection,
    get_redis_pool,
    close_redis_pool,
)
from causeconnect.middleware.logging import LoggingMiddleware
from causeconnect.services.websocket_manager import shutdown_connection_manager
from causeconnect.api.v1.router import api_router
from causeconnect.api.v1.endpoints.storage import files_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# ============================================================
# Application Lifespan Events
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
    - Check database connection
    - Initialize Redis connection pool (when enabled)

    Shutdown:
    - Close live WebSocket listeners
    - Close Redis connections
    """
    # ========== STARTUP ==========
    logger.info(f"Starting {settings.PROJECT_NAME}...")
    logger.info(f"Debug mode: {settings.DEBUG}")

    if await check_db_connection():
        logger.info("Database connection established successfully")
    else:
        logger.warning("Database connection check failed")

    if settings.REDIS_ENABLED:
        get_redis_pool()
        if await check_redis_connection():
            logger.info("Redis connection established successfully")
        else:
            logger.warning("Redis connection check failed - chat events stay on this instance")
    else:
        logger.info("Redis disabled - chat events are delivered locally")

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    await shutdown_connection_manager()
    await close_redis_pool()
    logger.info("Shutdown complete")


# ============================================================
# Create FastAPI Application
# ============================================================
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Social platform for charitable causes

    Features:
    - User Authentication (JWT)
    - Fundraising events, support and bookmarks
    - Posts, threaded comments and awards
    - Mock-payment donations
    - Squads with roles
    - Notifications
    - Realtime chat and presence
    """,
    version=__version__,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ----------------------------------------------------
# Middleware Configuration
# ----------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

if settings.DEBUG:
    app.add_middleware(LoggingMiddleware)


# ----------------------------------------------------
# Health Check Endpoints
# ----------------------------------------------------
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.PROJECT_NAME,
        "version": __version__,
        "status": "running",
        "docs": "/docs" if settings.DEBUG else "disabled"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint for monitoring.

    Checks:
    - Database connectivity
    - Redis connectivity (reported as "disabled" when switched off)
    """
    db_healthy = await check_db_connection()
    if settings.REDIS_ENABLED:
        redis_status = "connected" if await check_redis_connection() else "disconnected"
    else:
        redis_status = "disabled"

    status = "healthy"
    if not db_healthy or redis_status == "disconnected":
        status = "degraded"

    return JSONResponse(
        status_code=200 if db_healthy else 503,
        content={
            "status": status,
            "database": "connected" if db_healthy else "disconnected",
            "redis": redis_status,
        },
    )


# ============================================================
# Include API Routers
# ============================================================
app.include_router(
    api_router,
    prefix=settings.API_V1_PREFIX
)
app.include_router(files_router)


# ----------------------------------------------------
# Exception Handlers
# ----------------------------------------------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes (404), wrong methods (405) and framework-raised errors."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Not found"
    elif exc.status_code == 405:
        message = "Method not allowed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message, "status": exc.status_code},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query")),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "status": 400, "errors": errors},
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.exception(f"Internal server error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "status": 500}
    )
