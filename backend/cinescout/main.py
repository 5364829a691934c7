"""CineScout FastAPI Application.

Main entry point for the backend API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cinescout import __version__
from cinescout.api import router
from cinescout.config import Settings
from cinescout.models import AppError, ErrorCode
from cinescout.services import CacheReadError, GuideBuildError, build_services

settings = Settings.from_env()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: build every external client once
    services = build_services(settings)
    app.state.services = services
    logger.info("[APP] Services ready")
    yield
    # Shutdown
    await services.aclose()


app = FastAPI(
    title="CineScout API",
    description="Cinematic travel guides from a city name or a vibe",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error.model_dump(mode="json")},
    )


# Global exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed query parameters."""
    return _error_response(
        400,
        AppError(
            code=ErrorCode.VALIDATION_ERROR,
            message=str(exc),
            user_message="Invalid request format. Please check your input.",
        ),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle errors raised explicitly by route handlers."""
    code = ErrorCode.VALIDATION_ERROR if exc.status_code < 500 else ErrorCode.API_ERROR
    detail = str(exc.detail)
    return _error_response(
        exc.status_code,
        AppError(code=code, message=detail, user_message=detail),
    )


@app.exception_handler(GuideBuildError)
async def guide_build_exception_handler(request: Request, exc: GuideBuildError):
    """Generation failures are reported without provider details."""
    return _error_response(
        500,
        AppError(
            code=ErrorCode.GENERATION_ERROR,
            message=GuideBuildError.user_message,
            user_message=GuideBuildError.user_message,
        ),
    )


@app.exception_handler(CacheReadError)
async def cache_read_exception_handler(request: Request, exc: CacheReadError):
    """The explore wall is unavailable while the cache cannot be read."""
    return _error_response(
        500,
        AppError(
            code=ErrorCode.CACHE_ERROR,
            message=str(exc) or type(exc).__name__,
            user_message=CacheReadError.user_message,
        ),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.exception(f"[APP] Unhandled error on {request.url.path}")
    return _error_response(
        500,
        AppError(
            code=ErrorCode.API_ERROR,
            message=type(exc).__name__,
            user_message="Something went wrong. Please try again.",
        ),
    )


# Include API routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
