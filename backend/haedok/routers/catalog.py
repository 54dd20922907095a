from fastapi import APIRouter, Depends, HTTPException

from haedok.schemas.catalog import Catalog, ServicePreset
from haedok.services.catalog import get_catalog

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/", response_model=Catalog)
async def read_catalog(catalog: Catalog = Depends(get_catalog)):
    return catalog


@router.get("/presets/{name}", response_model=ServicePreset)
async def read_preset(name: str, catalog: Catalog = Depends(get_catalog)):
    preset = catalog.find_preset(name)
    if not preset:
        raise HTTPException(status_code=404, detail="Service preset not found")
    return preset
