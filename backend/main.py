"""
FastAPI application entry point for the invoice analytics backend.

This module creates the FastAPI app instance, installs middleware
(CORS and signed session cookies) and registers all routers.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from backend.config import settings
from backend.routes.analytics import router as analytics_router
from backend.routes.auth import router as auth_router
from backend.routes.chat import router as chat_router
from backend.routes.export import router as export_router
from backend.routes.health import router as health_router
from backend.routes.invoices import router as invoices_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: uses CORS_ALLOWED_ORIGINS (empty means none)
    - anything else: allows all origins for local development

    Session cookies are only sent cross-origin when the origin is listed
    explicitly, so production web clients must be configured.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


# Create FastAPI app
app = FastAPI(
    title="Invoice Analytics API",
    description="Invoice management, analytics and chat backend",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Report request validation failures as 400 with field-level details.
    """
    logger.warning(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "validation_error",
            "details": jsonable_encoder(exc.errors())
        }
    )


# Configure CORS with environment-based origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Signed cookie sessions for Google login
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
    https_only=settings.is_production(),
)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(invoices_router)
app.include_router(analytics_router)
app.include_router(export_router)
app.include_router(chat_router)

logger.info("FastAPI app initialized successfully")
