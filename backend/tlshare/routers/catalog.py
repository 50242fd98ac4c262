"""Option catalog endpoint."""

from fastapi import APIRouter

from tlshare.dependencies import CatalogDep
from tlshare.models import OptionCatalog

router = APIRouter()


@router.get("/", response_model=OptionCatalog)
async def get_catalog(catalog: CatalogDep):
    return catalog
