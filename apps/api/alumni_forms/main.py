"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from alumni_forms.core.config import settings
from alumni_forms.core.errors import (
    CollaboratorError,
    InvariantViolation,
    NotFoundError,
    ValidationError,
)
from alumni_forms.db.session import engine

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,  # 10% of requests for performance monitoring
        send_default_pii=False,  # Submitted answers must never reach Sentry
    )
    logging.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from alumni_forms.core.rate_limit import limiter


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Alumni Forms API",
    description="Dynamic form builder and submission-to-contact mapping API",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Actor-Id", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

# ============================================================================
# Error Handlers
# ============================================================================


def _stage(exc) -> str | None:
    return exc.stage.value if exc.stage else None


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "detail": exc.message,
            "errors": exc.errors,
            "field_ids": exc.field_ids,
            "stage": _stage(exc),
        },
    )


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": exc.message, "stage": _stage(exc)})


async def collaborator_error_handler(request: Request, exc: CollaboratorError) -> JSONResponse:
    logger.error(
        "collaborator_error",
        extra={"route": request.url.path, "method": request.method, "stage": _stage(exc)},
    )
    return JSONResponse(
        status_code=503,
        content={"detail": "Storage temporarily unavailable", "stage": _stage(exc)},
    )


async def invariant_violation_handler(request: Request, exc: InvariantViolation) -> JSONResponse:
    logger.error(
        "invariant_violation",
        extra={"route": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal error"})


app.add_exception_handler(ValidationError, validation_error_handler)
app.add_exception_handler(NotFoundError, not_found_error_handler)
app.add_exception_handler(CollaboratorError, collaborator_error_handler)
app.add_exception_handler(InvariantViolation, invariant_violation_handler)

# ============================================================================
# Routers
# ============================================================================

from alumni_forms.routers import form_editor, forms, forms_public, submissions

# Fixed-prefix routers first so "/forms/editor" and "/forms/public" never hit "/forms/{id}"
app.include_router(form_editor.router)
app.include_router(forms_public.router)
app.include_router(forms.router)
app.include_router(submissions.router)


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
