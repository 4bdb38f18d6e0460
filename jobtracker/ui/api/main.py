"""FastAPI application for JobTracker"""

import sys
import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import time

from .config import get_settings
from .database import TrackerDatabase
from .dependencies import get_db
from .exceptions import TrackerException
from .models.responses import HealthResponse
from .routers import auth_router, applications_router

# Get settings
settings = get_settings()

# Configure logging based on environment
log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown"""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Database: {settings.database_path}")

    if settings.is_production and settings.jwt_secret_key == "change-me-in-production":
        logger.warning("JWT_SECRET_KEY is the default value; set it before serving real users")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name} API")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    JobTracker API

    Personal job application tracker: each account owns its own list of
    applications. Dashboards and statistics are computed by the client
    from the full list.

    ## Features
    - **Auth**: Register, login, bearer tokens, password reset links
    - **Applications**: Owner-scoped create, list, update and delete
    """,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

# Add GZip compression for responses > 1KB
app.add_middleware(GZipMiddleware, minimum_size=1000)


# Request timing and logging middleware
@app.middleware("http")
async def request_middleware(request: Request, call_next):
    start_time = time.time()
    request_id = f"{int(start_time * 1000)}"

    if settings.debug:
        logger.debug(f"[{request_id}] {request.method} {request.url.path}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        response.headers["X-Request-ID"] = request_id

        if process_time > 2.0:
            logger.warning(
                f"[{request_id}] Slow request: {request.method} {request.url.path} "
                f"took {process_time:.2f}s"
            )

        return response

    except Exception as e:
        logger.error(f"[{request_id}] Request failed: {e}", exc_info=True)
        raise


def _error_body(message: str, errors=None) -> dict:
    body = {"message": message}
    if errors:
        body["errors"] = errors
    return body


@app.exception_handler(TrackerException)
async def tracker_exception_handler(request: Request, exc: TrackerException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.errors))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": ".".join(loc) or "body", "message": message})
    return JSONResponse(status_code=400, content=_error_body("Validation failed", errors))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    message = str(exc) if settings.debug else "Server error"
    return JSONResponse(status_code=500, content=_error_body(message))


# Include routers
app.include_router(auth_router)
app.include_router(applications_router)


# Health check endpoint (always available, even in production)
@app.get("/health", tags=["health"], response_model=HealthResponse)
async def health_check():
    """Health check endpoint for load balancers and monitoring"""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


# Readiness check (for Kubernetes)
@app.get("/ready", tags=["health"])
async def readiness_check(db: TrackerDatabase = Depends(get_db)):
    """Readiness check - returns 200 only when the record store answers"""
    try:
        with db.get_connection() as conn:
            conn.execute("SELECT 1")
    except sqlite3.Error as e:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": str(e)}
        )
    return {"status": "ready"}


# Root endpoint
@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API info"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "docs": "/docs" if settings.debug else "Disabled in production",
        "health": "/health",
        "ready": "/ready",
    }


# Run with: python -m jobtracker.ui.api.main
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "jobtracker.ui.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
        log_level=settings.log_level,
        access_log=settings.debug,
    )
