"""FastAPI application exposing authentication and user management endpoints."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import Counter

from .config import configure_logging, settings, validate_runtime_config
from .database import init_db
from .errors import RequestValidationFailed, UserAPIError
from .routes import auth as auth_routes
from .routes import users as user_routes
from .schemas import format_validation_error

logger = logging.getLogger(__name__)

# Prometheus counter to track API requests by method, endpoint and status code
REQUEST_COUNTER = Counter(
    "api_requests_total",
    "Total API requests",
    ["method", "endpoint", "status"],
)

_STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    validate_runtime_config()
    init_db()
    yield


app = FastAPI(title=settings.api_title, lifespan=lifespan)


def _endpoint_label(request: Request) -> str:
    """Route template for metrics, so path ids do not become label values."""
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests and their outcomes while updating metrics."""
    logger.info("request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        REQUEST_COUNTER.labels(
            method=request.method,
            endpoint=_endpoint_label(request),
            status=str(response.status_code),
        ).inc()
        logger.info(
            "response %s %s status %s",
            request.method,
            request.url.path,
            response.status_code,
        )
        return response
    except Exception:
        # Traceback is logged by unhandled_error_handler.
        REQUEST_COUNTER.labels(
            method=request.method,
            endpoint=_endpoint_label(request),
            status="500",
        ).inc()
        raise


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = RequestValidationFailed(format_validation_error(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(UserAPIError)
async def user_api_error_handler(request: Request, exc: UserAPIError):
    if exc.status_code >= 500:
        logger.error(
            "error handling %s %s: %s", request.method, request.url.path, type(exc).__name__
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error for %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Hello from the User Management API!"


@app.get("/health")
def health():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.monotonic() - _STARTED_AT,
    }


@app.get("/api")
def api_root():
    return {"message": "User API is running"}


app.include_router(auth_routes.router, prefix="/api/auth", tags=["auth"])
app.include_router(user_routes.router, prefix="/api/users", tags=["users"])
