"""Main FastAPI application for the Run List API."""

import logging
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Dict, Any

import yaml
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .db.connection import db_manager, get_db_pool
from .errors import register_exception_handlers
from .errors.problem_details import ServiceUnavailableError
from .middleware.request_logging import RequestLoggingMiddleware
from .routes import runs_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Run List API"
SERVICE_VERSION = "1.0.0"
SERVICE_DESCRIPTION = "Lists job runs with stable, bidirectional cursor-based pagination"

HEALTH_PATHS = ["/health", "/ready", "/live", "/"]


def load_openapi_spec() -> Dict[str, Any]:
    """Load the hand-maintained OpenAPI document from YAML."""
    openapi_file = Path(__file__).parent.parent / "openapi" / "run-list.yaml"

    try:
        with open(openapi_file, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"OpenAPI spec file not found at {openapi_file}, using auto-generated spec")
        return {}
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse OpenAPI spec: {e}, using auto-generated spec")
        return {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {SERVICE_NAME}")
    settings = get_settings()

    logging.getLogger().setLevel(getattr(logging, settings.log_level))

    try:
        await db_manager.initialize()
        logger.info("Database connection pool initialized")

        pool = await get_db_pool()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        logger.info("Database connectivity verified")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    try:
        await db_manager.close()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    custom_openapi = load_openapi_spec()
    info = custom_openapi.get("info", {})

    app = FastAPI(
        title=info.get("title", SERVICE_NAME),
        description=info.get("description", SERVICE_DESCRIPTION),
        version=info.get("version", SERVICE_VERSION),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    if custom_openapi:
        # Serve the hand-maintained document with the configured server URL
        def get_custom_openapi():
            spec = dict(custom_openapi)
            if spec.get("servers"):
                spec["servers"] = [{**spec["servers"][0], "url": settings.api_url}] + spec["servers"][1:]
            return spec

        app.openapi = get_custom_openapi

    if settings.log_requests:
        app.add_middleware(RequestLoggingMiddleware, skip_paths=HEALTH_PATHS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    app.include_router(runs_router, prefix="/v1")

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint with database connectivity test."""
        try:
            pool = await get_db_pool()
            async with pool.acquire() as conn:
                await conn.execute("SELECT 1")

            return {
                "status": "healthy",
                "service": SERVICE_NAME,
                "version": SERVICE_VERSION,
                "database": "connected"
            }
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            raise ServiceUnavailableError(
                detail="Database connection failed",
                database_error=str(e)
            )

    @app.get("/ready", tags=["Health"])
    async def ready_check() -> Dict[str, Any]:
        """Readiness check endpoint."""
        try:
            pool = await get_db_pool()
            async with pool.acquire() as conn:
                result = await conn.fetchval("SELECT COUNT(*) FROM pg_stat_activity")

            return {
                "status": "ready",
                "service": SERVICE_NAME,
                "database_connections": result
            }
        except Exception as e:
            logger.error(f"Readiness check failed: {e}")
            raise ServiceUnavailableError(
                detail="Service not ready",
                database_error=str(e)
            )

    @app.get("/live", tags=["Health"])
    async def liveness_check() -> Dict[str, str]:
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": SERVICE_NAME
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        """Root endpoint with API information."""
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()

    uvicorn.run(
        "runlist_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
