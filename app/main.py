"""
Geocodes API - Main application entry point.

Read-only reference data for cities and countries, as of a given date.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.database import Database
from app.geocodes.views import router as geocodes_router

settings = get_settings()
logger = logging.getLogger(__name__)


def uses_mongo() -> bool:
    return settings.GEOCODE_BACKEND.strip().lower() == "mongo"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION} ({settings.GEOCODE_BACKEND} backend)")
    if uses_mongo():
        await Database.connect()
    yield
    # Shutdown
    if uses_mongo():
        await Database.disconnect()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    description="""
## Geocodes API

Versioned, read-only lookups of geocoding reference data.

### Features

- **Cities**: search by name prefix or fetch by code, as of a reference date
- **Countries**: search by name prefix or fetch by code, as of a reference date

Every route takes the API version in its path (`/v1/...`) and a `date`
query parameter formatted as `yyyy-MM-dd`.
    """,
    lifespan=lifespan,
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(geocodes_router, prefix=settings.API_PREFIX)


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    health = {
        "status": "healthy",
        "backend": settings.GEOCODE_BACKEND,
        "version": settings.APP_VERSION,
    }
    if uses_mongo():
        health["database"] = "connected" if Database.client else "disconnected"
    return health
