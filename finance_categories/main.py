"""
Main FastAPI application for Finance Categories

This module initializes the FastAPI application, configures CORS,
registers routers, and sets up exception handling.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from finance_categories.api.v1.endpoints import categories
from finance_categories.core.config import settings, get_cors_origins
from finance_categories.core.redis_client import cache_status, close_redis
from finance_categories.db.session import init_db
from finance_categories.services.category_actions import UNEXPECTED_ERROR

# Setup logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """
    # Startup
    logger.info("=" * 50)
    logger.info(f"Starting {settings.project_name}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"API prefix: {settings.api_v1_prefix}")
    logger.info(f"Category cache enabled: {settings.cache_enabled}")
    logger.info(f"CORS origins: {get_cors_origins()}")
    logger.info("=" * 50)

    init_db()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.project_name}...")
    await close_redis()


def create_application() -> FastAPI:
    """
    Application factory for creating FastAPI instance

    This factory pattern allows:
    - Creating app with different settings for tests
    - Better control over initialization
    """

    app = FastAPI(
        title=settings.project_name,
        description="Category management for personal finance tracking",
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_routers(app)
    register_exception_handlers(app)
    register_base_routes(app)

    return app


def register_routers(app: FastAPI) -> None:
    """Register API routers"""
    app.include_router(
        categories.router,
        prefix=f"{settings.api_v1_prefix}/categories",
        tags=["Categories"]
    )
    logger.info("Categories router registered")


def register_exception_handlers(app: FastAPI) -> None:
    """Turn unhandled errors into the generic failure envelope"""

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": UNEXPECTED_ERROR, "code": "unexpected"}
        )


def register_base_routes(app: FastAPI) -> None:
    """Register base application routes"""

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "Finance Categories API",
            "version": VERSION,
            "status": "running",
            "docs_url": "/docs" if settings.debug else "disabled",
            "features": [
                "Category CRUD scoped per user",
                "Idempotent default categories",
                "Referential integrity on delete",
            ]
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": VERSION,
            "services": {
                "api": "operational",
                "cache": await cache_status(),
            }
        }


# Create application instance
app = create_application()


if __name__ == "__main__":
    """
    Development server entry point

    For production use:
    uvicorn finance_categories.main:app --workers 4
    """
    import uvicorn

    uvicorn.run(
        "finance_categories.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
