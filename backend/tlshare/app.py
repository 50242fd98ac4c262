"""
Timeline Share - FastAPI Backend
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tlshare.config import settings
from tlshare.database.db import init_db
from tlshare.logging import setup_logging, get_logger
from tlshare.routers import cache, catalog, share, timeline
from tlshare.services.cache import TimelineCacheService
from tlshare.services.catalog import load_catalog
from tlshare.services.timeline import TimelineService

logger = get_logger('main')


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting Timeline Share API")

    await init_db(settings.CACHE_DATABASE_PATH)

    # Initialize services
    app.state.catalog = load_catalog(settings.CATALOG_PATH)
    app.state.timeline_service = TimelineService(
        catalog=app.state.catalog,
        default_title=settings.DEFAULT_TITLE,
    )
    app.state.cache_service = TimelineCacheService(
        db_path=settings.CACHE_DATABASE_PATH,
        cache_key=settings.CACHE_KEY,
        max_entries=settings.CACHE_MAX_ENTRIES,
    )
    logger.info("Services initialized")

    yield

    logger.info("Shutting down application")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Timeline Share API",
        description="Formation and turn timeline planner with shareable links",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog.router, prefix="/api/catalog", tags=["Catalog"])
    app.include_router(timeline.router, prefix="/api/timeline", tags=["Timeline"])
    app.include_router(share.router, prefix="/api/share", tags=["Share"])
    app.include_router(cache.router, prefix="/api/cache", tags=["Cache"])

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "timeline-share",
            "catalog_loaded": hasattr(app.state, 'catalog'),
        }

    @app.get("/")
    async def root():
        return {
            "name": "Timeline Share API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app
