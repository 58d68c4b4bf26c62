"""
FastAPI application for TimeScope.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app import __version__, telemetry
from backend.app.config import logger, settings
from backend.app.models import (
    AnalysisDetails,
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
)
from timescope import SUPPORTED_LANGUAGES, AnalysisFailure, ComplexityAnalyzer
from timescope.grammars import new_parser

_STATUS_CODES = {
    "empty_input": 400,
    "source_too_large": 413,
    "parse_error": 422,
    "internal_error": 500,
}

analyzer = ComplexityAnalyzer(
    limits=settings.parser_limits,
    default_dialect=settings.DEFAULT_DIALECT,
    default_language=settings.DEFAULT_LANGUAGE,
)


def unavailable_grammars() -> list[str]:
    """Grammars that fail to load; analysis falls back to the others."""
    missing = []
    for name in SUPPORTED_LANGUAGES:
        try:
            new_parser(name)
        except Exception as exc:
            logger.error("Grammar %s unavailable: %s", name, exc)
            missing.append(name)
    return missing


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------


async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"
    return response


async def request_size_middleware(request: Request, call_next):
    if request.method in ("POST", "PUT", "PATCH"):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.MAX_REQUEST_SIZE:
            return JSONResponse(
                status_code=413,
                content={
                    "success": False,
                    "error": f"Request body exceeds {settings.MAX_REQUEST_SIZE} bytes",
                    "code": "request_too_large",
                },
            )
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------


analysis_router = APIRouter()


@analysis_router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def analyze_code(request: AnalyzeRequest):
    """
    Estimate the time complexity of a snippet.

    Runs in the worker thread pool; the engine keeps no state between calls.
    """
    telemetry.increment("requests_total")
    result = analyzer.analyze(request.code, request.dialect, request.grammar)

    if isinstance(result, AnalysisFailure):
        telemetry.increment("requests_failed")
        if result.error_type == "parse_error":
            telemetry.increment("parse_errors")
        elif result.error_type == "internal_error":
            telemetry.increment("internal_errors")
        error = ErrorResponse(error=result.reason, code=result.error_type)
        return JSONResponse(
            status_code=_STATUS_CODES[result.error_type],
            content=error.model_dump(),
        )

    telemetry.record_grammar(result.language)
    logger.info(
        "Analyzed %d chars (%s): %s",
        len(request.code),
        result.language,
        result.complexity.label,
    )
    metrics = result.metrics
    return AnalyzeResponse(
        complexity=result.complexity.label,
        rating=result.complexity.rating,
        description=result.complexity.description,
        dialect=result.dialect,
        language=result.language,
        details=AnalysisDetails(
            loops=metrics.total_loops,
            recursion=metrics.any_recursion,
            functions=metrics.total_functions,
            maxLoopDepth=metrics.max_loop_depth,
        ),
        tips=list(result.tips),
    )


health_router = APIRouter()


@health_router.get("/health")
def health():
    """Health check: every grammar the engine may try must load."""
    missing = unavailable_grammars()
    response = {
        "status": "degraded" if missing else "ok",
        "version": __version__,
        "languages": [name for name in SUPPORTED_LANGUAGES if name not in missing],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if missing:
        response["issues"] = [f"grammar_unavailable:{name}" for name in missing]
    return response


@health_router.get("/metrics")
async def metrics():
    return {
        "success": True,
        "metrics": telemetry.snapshot(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ---------------------------------------------------------------------------
# FastAPI app assembly
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("TimeScope v%s starting", __version__)
    logger.info(
        "Default dialect: %s, default language: %s",
        settings.DEFAULT_DIALECT.value,
        settings.DEFAULT_LANGUAGE or "none",
    )

    if settings.PRELOAD_GRAMMARS:
        missing = unavailable_grammars()
        if missing:
            if not settings.DEBUG:
                raise RuntimeError(f"Grammars failed to load: {', '.join(missing)}")
            logger.warning("Continuing without %s (DEBUG mode)", ", ".join(missing))
        else:
            logger.info("Loaded %d grammars", len(SUPPORTED_LANGUAGES))

    yield

    logger.info("Shutting down")


app = FastAPI(
    title="TimeScope API",
    description="Heuristic time-complexity estimation for code snippets",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors without request bodies."""
    logger.error(
        "Unhandled exception on %s %s: %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc)[:200],
    )
    telemetry.increment("requests_failed")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "code": "internal_error"},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed payloads, logging field names but never values."""
    error_details = [
        {"field": err.get("loc", [])[-1] if err.get("loc") else "unknown", "type": err.get("type")}
        for err in exc.errors()[:5]
    ]
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, error_details)
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": "Invalid request format", "code": "invalid_request"},
    )


app.middleware("http")(security_headers_middleware)
app.middleware("http")(request_size_middleware)

cors_origins = settings.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {
        "name": "TimeScope API",
        "version": __version__,
        "status": "ok",
    }


app.include_router(health_router, prefix="/api/v1", tags=["health"])
app.include_router(analysis_router, prefix="/api/v1", tags=["analysis"])
app.include_router(analysis_router, tags=["analysis-compat"])
