"""
FastAPI application main module.
Blog service backed by the Supabase GraphQL API: middleware, error handling and health checks.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import os
from contextlib import asynccontextmanager
from app.api.v1 import api_router
from app.cache.response_cache import create_response_cache
from app.config import CACHE_SETTINGS, ConfigurationError
from app.models.schemas.base import ErrorResponse
from app.utils import setup_logging, get_logger
from app.utils.observability import REQUEST_ID_HEADER, ensure_request_id

setup_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_file=os.getenv("LOG_FILE") or None,
    enable_console=True
)

logger = get_logger(__name__)

SERVICE_NAME = "blog-graphql-service"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared response cache; clients and services are per request."""
    app.state.response_cache = create_response_cache()
    logger.info("Blog service started", cache=type(app.state.response_cache).__name__)
    try:
        yield
    finally:
        app.state.response_cache = None
        logger.info("Blog service stopped")

app = FastAPI(
    title="Blog GraphQL Service",
    description="""
    Blog listing, detail and creation on top of a hosted GraphQL API.

    ## Features
    * **Paginated listing** - published posts, newest first
    * **Author enrichment** - author name/email attached from the accounts store
    * **Post creation** - authenticated, published immediately

    ## Authentication
    Creating a post requires the caller's access token:
    ```
    Authorization: Bearer <access token>
    ```
    """,
    version=SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")

def _error_response(request: Request, status_code: int, message, headers=None, details=None) -> JSONResponse:
    body = ErrorResponse(message=message, request_id=_request_id(request), details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )

def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation error entries without the non-serializable ``ctx``/``input`` payloads."""
    return [
        {k: v for k, v in error.items() if k in ("type", "loc", "msg")}
        for error in exc.errors()
    ]

@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Attach a request id, time the request and log both ends of it."""
    request_id = ensure_request_id(request.headers)
    request.state.request_id = request_id
    started = time.perf_counter()
    logger.info(
        "Request started",
        method=request.method,
        path=request.url.path,
        query=request.url.query or None,
        client=request.client.host if request.client else None,
        request_id=request_id,
    )

    response = await call_next(request)

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    response.headers[REQUEST_ID_HEADER] = request_id
    response.headers["X-Process-Time"] = str(elapsed_ms)
    logger.info(
        "Request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        process_time_ms=elapsed_ms,
        request_id=request_id,
    )
    return response

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = jsonable_errors(exc)
    logger.warning("Request validation failed", path=request.url.path, errors=details, request_id=_request_id(request))
    return _error_response(request, 422, "Request validation failed", details=details)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(
        "HTTP exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=_request_id(request),
    )
    return _error_response(request, exc.status_code, exc.detail, headers=getattr(exc, "headers", None))

@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    """Missing endpoint or key: the service cannot reach its backend."""
    logger.error("Service misconfigured", error=str(exc), request_id=_request_id(request))
    return _error_response(request, 503, "Service is not configured")

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        request_id=_request_id(request),
        exc_info=True,
    )
    return _error_response(request, 500, "Internal server error")

@app.get("/health", tags=["health"], summary="Liveness and cache backend")
async def health_check(request: Request):
    cache = getattr(request.app.state, "response_cache", None)
    payload = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": time.time(),
        "cache_backend": "redis" if CACHE_SETTINGS.get("use_redis", False) else "memory",
    }
    if cache is not None and hasattr(cache, "snapshot"):
        payload["cache"] = cache.snapshot()
    return payload

@app.get("/", tags=["root"])
async def root():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "documentation": "/docs",
        "health_check": "/health",
        "api_base": "/api/v1",
    }

app.include_router(api_router, prefix="/api/v1")

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        reload_dirs=["app"],
    )
