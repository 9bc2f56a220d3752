"""
main.py — Tax engine FastAPI application entry point.

Start with: uvicorn taxengine.main:app --reload --port 8000
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taxengine.config import settings
from taxengine.errors import (
    ComputationInvariantViolation,
    InputValidationError,
    UnauthorizedError,
)
from taxengine.schemas import ErrorBody, ErrorDetail, ErrorResponse

# ---------------------------------------------------------------------------
# Logging — configured before anything else
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan — startup & shutdown hooks
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
      1. Load and validate the statutory rule tables (fail fast on a bad table)
      2. Compile the LangGraph pipeline
    """
    from taxengine.graph.graph import get_graph
    from taxengine.rules import supported_financial_years

    years = supported_financial_years()
    logger.info("Rule tables ready for %d financial years", len(years))

    app.state.tax_graph = get_graph()
    logger.info("Tax engine pipeline compiled and ready")

    logger.info("%s v%s starting up", settings.app_name, settings.app_version)
    yield
    logger.info("%s shutting down", settings.app_name)


# ---------------------------------------------------------------------------
# FastAPI application instance
# ---------------------------------------------------------------------------
app = FastAPI(
    title=f"{settings.app_name} API",
    version=settings.app_version,
    description=(
        "Deterministic Indian income tax computation for the Old and New regimes: "
        "regime comparison, pre-filing audit score, recommendations and export summaries."
    ),
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# ---------------------------------------------------------------------------
# CORS middleware — restricted to frontend origins from settings
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error response helper
# ---------------------------------------------------------------------------
def _make_error_response(
    code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
    status_code: int = 500,
) -> JSONResponse:
    """Build a standard {error: {code, message, details}} response."""
    body = ErrorResponse(
        error=ErrorBody(
            code=code,
            message=message,
            details=[ErrorDetail(**d) for d in details or []],
        )
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


# ---------------------------------------------------------------------------
# Global exception handlers — registered BEFORE routers
# ---------------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Converts Pydantic / FastAPI validation errors to the standard 400 envelope.
    Returns ALL field violations in one response.
    """
    details = []
    for error in exc.errors():
        # Build dot-notation field path, excluding the top-level 'body' loc
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        details.append({"field": field or None, "issue": error["msg"]})
    return _make_error_response(
        code="VALIDATION_ERROR",
        message="Request validation failed",
        details=details,
        status_code=400,
    )


@app.exception_handler(InputValidationError)
async def input_validation_error_handler(
    request: Request, exc: InputValidationError
) -> JSONResponse:
    """Malformed input caught by the engine itself (unknown financial year, ...)."""
    return _make_error_response(
        code="VALIDATION_ERROR",
        message=exc.issue,
        details=[exc.to_detail()],
        status_code=400,
    )


@app.exception_handler(UnauthorizedError)
async def unauthorized_error_handler(
    request: Request, exc: UnauthorizedError
) -> JSONResponse:
    return _make_error_response(
        code="UNAUTHORIZED",
        message=str(exc) or "Authentication required",
        status_code=401,
    )


@app.exception_handler(ComputationInvariantViolation)
async def invariant_violation_handler(
    request: Request, exc: ComputationInvariantViolation
) -> JSONResponse:
    """
    A statutory table is corrupt. Never the caller's fault: logged at ERROR,
    reported as 500 without the table internals unless DEBUG.
    """
    logger.error(
        "Computation invariant violated on %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )
    details = [{"issue": str(exc)}] if settings.debug else []
    return _make_error_response(
        code="COMPUTATION_INVARIANT_VIOLATION",
        message="Tax rule tables failed an integrity check",
        details=details,
        status_code=500,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """
    Converts FastAPI HTTPException to standard error format with semantic code.
    """
    code_map = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "VALIDATION_ERROR",
    }
    code = code_map.get(exc.status_code, f"HTTP_{exc.status_code}")
    return _make_error_response(
        code=code,
        message=str(exc.detail),
        status_code=exc.status_code,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Catch-all for unexpected errors.
    DEBUG=true  → includes exception type & message in details (dev only).
    DEBUG=false → generic message; full traceback logged server-side only.
    """
    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=True,
    )
    if settings.debug:
        details = [{"issue": f"{type(exc).__name__}: {exc}"}]
        message = "An unexpected error occurred (debug details included)"
    else:
        details = []
        message = "An unexpected error occurred"
    return _make_error_response(
        code="INTERNAL_ERROR",
        message=message,
        details=details,
        status_code=500,
    )


# ---------------------------------------------------------------------------
# Health endpoint (no auth required)
# ---------------------------------------------------------------------------
@app.get("/api/health", tags=["System"])
async def health_check() -> dict:
    """Returns service health status."""
    return {
        "status": "ok",
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ---------------------------------------------------------------------------
# Stage routers
# ---------------------------------------------------------------------------
from taxengine.audit.routes import router as audit_router  # noqa: E402
from taxengine.calculator.routes import router as calculator_router  # noqa: E402
from taxengine.export.routes import router as export_router  # noqa: E402
from taxengine.graph.routes import router as pipeline_router  # noqa: E402
from taxengine.recommendation.routes import router as recommendation_router  # noqa: E402

app.include_router(calculator_router)
app.include_router(audit_router)
app.include_router(recommendation_router)
app.include_router(export_router)
app.include_router(pipeline_router)
