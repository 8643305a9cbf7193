"""
SimVex API - Main Application Entry Point.

Project, membership and 3D asset storage backend for SimVex.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from simvex import __version__
from simvex.config import get_settings
from simvex.core.exceptions import SimvexAPIException
from simvex.core.responses import error_response, internal_error_response
from simvex.api.v1.router import api_router
from simvex.db.base import Base
from simvex.db.session import engine, get_active_database_url, is_using_sqlite_fallback
from simvex import models  # noqa: F401  (registers mappers on Base.metadata)
from simvex.storage.factory import get_storage_backend, get_storage_config

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Resolve storage configuration before serving, so a missing CDN base or
    bucket credential stops the process instead of failing per request.
    """
    storage_config = get_storage_config()
    get_storage_backend()

    logger.info(f"Starting {settings.PROJECT_NAME}")
    logger.info(f"Storage backend: {storage_config.backend}")
    logger.info(f"Naming scheme for new projects: {storage_config.naming_scheme}")
    logger.info(f"CDN base URL: {storage_config.cdn_base_url}")
    logger.info(f"Dev mode (identity fallback): {settings.DEV_MODE}")

    if is_using_sqlite_fallback():
        # Migrations are for PostgreSQL; the dev database is created in place
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.warning(f"[DEV MODE] SQLite database ready at {get_active_database_url()}")
    else:
        logger.info("Database: PostgreSQL (schema managed by Alembic)")

    yield

    await engine.dispose()
    logger.info(f"Shut down {settings.PROJECT_NAME}")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
## SimVex API

Backend for collaborative 3D simulation projects.

### Features
- **Projects**: Team projects with an owner/editor/viewer member roster
- **Asset Storage**: Concurrent upload of model files and a JSON scene file to an S3-compatible bucket served through a CDN
- **Node Metadata**: Per-node lookups in the uploaded scene file
- **AI Assistant**: Questions about a node, relayed to the assistant service
    """,
    version=__version__,
    openapi_tags=[
        {"name": "projects", "description": "Project, file and membership operations"},
        {"name": "health", "description": "Service health checks"},
    ],
    lifespan=lifespan,
)

# Browser clients call the API directly
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SimvexAPIException)
async def simvex_exception_handler(request: Request, exc: SimvexAPIException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning(f"{exc.error} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return internal_error_response()


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "name": settings.PROJECT_NAME,
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
        "api": settings.API_V1_PREFIX,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "simvex.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
