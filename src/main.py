"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Can create multiple app instances if needed (e.g., for testing)

For local development:
    uvicorn src.main:app --reload

For production:
    gunicorn src.main:app -w 4 -k uvicorn.workers.UvicornWorker
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.dependencies import require_admin
from .api.routes import (
    auth,
    booking,
    emails,
    galleries,
    health,
    instagram,
    messages,
    portfolio,
    videos,
)
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=get_settings().log_level.upper(),
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Runs on startup and shutdown. FastAPI calls this automatically when
    the application starts/stops.
    """
    # Startup
    settings = get_settings()

    logger.info(
        "Studio Site API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {
                "snowflake": settings.snowflake_mock_mode,
                "r2": settings.r2_mock_mode,
                "email": settings.resend_mock_mode,
            }
        }
    )

    # Validate configuration
    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )
        # For development, we log the error but continue

    yield

    # Shutdown
    logger.info("Studio Site API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    This function is called once at startup (in production) or
    multiple times (in tests with different configurations).
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Backend for a photographer/videographer portfolio site.

        ## Public

        - Portfolio images and videos
        - Booking requests (emailed to the studio)
        - Instagram mirror
        - Inbound email webhook

        ## Admin

        Everything under `/api/admin` requires the session cookie set by
        `POST /api/auth/login`.

        - Galleries: create, upload, rename
        - Videos: upload, rename, delete
        - Messages: the inbox of email received on the site's domain
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    # Configure allowed origins via CORS_ORIGINS environment variable.
    # Credentials are allowed so the admin session cookie is sent.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Public routers
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(booking.router, prefix="/api/booking", tags=["Booking"])
    app.include_router(emails.router, prefix="/api/emails", tags=["Email"])
    app.include_router(instagram.router, prefix="/api/instagram", tags=["Instagram"])
    app.include_router(portfolio.router, prefix="/api/portfolio", tags=["Portfolio"])

    # Admin routers
    admin = [Depends(require_admin)]

    app.include_router(
        galleries.router,
        prefix="/api/admin/galleries",
        tags=["Admin: Galleries"],
        dependencies=admin,
    )

    app.include_router(
        videos.router,
        prefix="/api/admin/videos",
        tags=["Admin: Videos"],
        dependencies=admin,
    )

    app.include_router(
        messages.router,
        prefix="/api/admin/messages",
        tags=["Admin: Messages"],
        dependencies=admin,
    )

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "Studio Site API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        In production, this prevents stack traces from leaking to clients.
        We log the full error server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
            }
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
