from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..repository import LookupRepository
from .deps import get_lookup_repository

router = APIRouter(prefix="/api/lookups", tags=["lookups"])


@router.get("/countries")
def list_countries(repo: LookupRepository = Depends(get_lookup_repository)) -> Dict[str, Any]:
    return {"success": True, "data": [country.model_dump() for country in repo.countries()]}


@router.get("/regions")
def list_regions(repo: LookupRepository = Depends(get_lookup_repository)) -> Dict[str, Any]:
    return {"success": True, "data": [region.model_dump() for region in repo.regions()]}


@router.get("/regions/{country_code}")
def list_country_regions(country_code: str, repo: LookupRepository = Depends(get_lookup_repository)) -> Dict[str, Any]:
    return {"success": True, "data": [region.model_dump() for region in repo.regions_for_country(country_code)]}


__all__ = ["router"]
