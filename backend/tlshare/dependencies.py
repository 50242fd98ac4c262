"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated
from fastapi import Request, Depends

from tlshare.models import OptionCatalog
from tlshare.services.cache import TimelineCacheService
from tlshare.services.timeline import TimelineService


def get_catalog(request: Request) -> OptionCatalog:
    return request.app.state.catalog


def get_timeline_service(request: Request) -> TimelineService:
    return request.app.state.timeline_service


def get_cache_service(request: Request) -> TimelineCacheService:
    return request.app.state.cache_service


CatalogDep = Annotated[OptionCatalog, Depends(get_catalog)]
TimelineServiceDep = Annotated[TimelineService, Depends(get_timeline_service)]
TimelineCacheServiceDep = Annotated[TimelineCacheService, Depends(get_cache_service)]
