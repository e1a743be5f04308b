"""
Main Backend FastAPI application.
"""
import logging
import sys
import re
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .core.config import settings
from .api.v1.directory import router as directory_router, limiter
from .schemas.directory import ErrorResponse

log_level = logging.DEBUG if settings.debug else logging.INFO

logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stdout
)

# Set specific loggers to appropriate levels
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)  # Reduce access log noise
logging.getLogger("uvicorn.error").setLevel(logging.INFO)
logging.getLogger("httpx").setLevel(logging.WARNING)  # supabase transport logs every request

logger = logging.getLogger(__name__)


class ReverseProxyMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle reverse proxy headers (Netlify, ALB, etc.)

    Fixes scheme and host when FastAPI is behind a reverse proxy.
    """
    async def dispatch(self, request: Request, call_next):
        forwarded_proto = request.headers.get('x-forwarded-proto')
        if forwarded_proto:
            request.scope['scheme'] = forwarded_proto

        forwarded_host = request.headers.get('x-forwarded-host')
        if forwarded_host:
            request.scope['server'] = (forwarded_host, None)

        response = await call_next(request)
        return response


def is_origin_allowed(origin: str) -> bool:
    """Check if origin is allowed via static list or dynamic patterns."""
    if not origin:
        return False

    if origin in settings.allowed_origins:
        return True

    for pattern in settings.cors_origin_patterns:
        if re.match(pattern, origin):
            return True

    return False


class DynamicCORSMiddleware(BaseHTTPMiddleware):
    """
    CORS middleware that supports dynamic origin patterns.

    The directory is read-only, so only GET and OPTIONS are advertised.
    """
    async def dispatch(self, request: Request, call_next) -> Response:
        origin = request.headers.get("origin")

        # Handle preflight requests
        if request.method == "OPTIONS":
            if origin and is_origin_allowed(origin):
                response = Response(status_code=200)
                response.headers["Access-Control-Allow-Origin"] = origin
                response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
                response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
                response.headers["Access-Control-Max-Age"] = "600"
                return response

        response = await call_next(request)

        if origin and is_origin_allowed(origin):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Expose-Headers"] = "Content-Type"

        return response


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors in the directory envelope; unknown routes are NOT_FOUND."""
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(error="NOT_FOUND").model_dump(exclude_none=True),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error="HTTP_ERROR", details=str(exc.detail)).model_dump(),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    """Last-resort handler so failures outside route bodies keep the envelope."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="INTERNAL_ERROR", details=str(exc)).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown; the Supabase client is created on first use."""
    logger.info("🚀 Starting trade directory API...")
    logger.info(
        f"📇 Directory ranking: count_all_tiers={settings.directory_count_all_tiers}, "
        f"ranked_rpc={settings.directory_ranking_rpc_enabled}, "
        f"hide_inactive_vendors={settings.directory_hide_inactive_vendors}"
    )
    logger.info("🟢 Application startup complete")

    yield

    logger.info("🔴 Application shutdown complete")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title=settings.project_name,
        description="B2B trade directory: tier-ranked public product search",
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Add reverse proxy middleware FIRST (before CORS)
    app.add_middleware(ReverseProxyMiddleware)
    app.add_middleware(DynamicCORSMiddleware)

    logger.info(f"🔒 CORS configured with {len(settings.allowed_origins)} static origins")

    if settings.is_production_environment:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=["localhost", "127.0.0.1", "*.netlify.app"]
        )

    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # PUBLIC: Unauthenticated directory search with rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.include_router(directory_router, prefix=f"{settings.api_v1_str}/dir", tags=["directory"])
    logger.info(f"🌐 Directory search enabled at {settings.api_v1_str}/dir/products (rate limited: {settings.directory_rate_limit})")

    return app


# Create the FastAPI app instance
app = create_application()


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Trade Directory API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs" if settings.debug else "disabled",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "trade-directory-api",
        "environment": settings.environment,
        "debug": settings.debug,
    }
