from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..models import OrganizationCreate, OrganizationSearch, OrganizationUpdate
from ..repository import OrganizationRepository
from .deps import Pagination, get_organization_repository, get_pagination

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


def get_organization_filters(name: Optional[str] = None, website: Optional[str] = None) -> OrganizationSearch:
    return OrganizationSearch(name=name, website=website)


@router.get("")
def list_organizations(
    paging: Pagination = Depends(get_pagination),
    repo: OrganizationRepository = Depends(get_organization_repository),
) -> Dict[str, Any]:
    result = repo.get_all(paging.page, paging.limit)
    return {"success": True, **result.model_dump(mode="json")}


@router.get("/search")
def search_organizations(
    filters: OrganizationSearch = Depends(get_organization_filters),
    paging: Pagination = Depends(get_pagination),
    repo: OrganizationRepository = Depends(get_organization_repository),
) -> Dict[str, Any]:
    result = repo.search(filters, paging.page, paging.limit)
    return {"success": True, **result.model_dump(mode="json")}


@router.get("/{organization_id}")
def get_organization(organization_id: int, repo: OrganizationRepository = Depends(get_organization_repository)):
    organization = repo.get_by_id(organization_id)
    if organization is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": "Organization not found"},
        )
    return {"success": True, "data": organization.model_dump(mode="json")}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_organization(
    payload: OrganizationCreate,
    repo: OrganizationRepository = Depends(get_organization_repository),
) -> Dict[str, Any]:
    organization = repo.create(payload)
    return {"success": True, "data": organization.model_dump(mode="json")}


@router.put("/{organization_id}")
def update_organization(
    organization_id: int,
    payload: OrganizationUpdate,
    repo: OrganizationRepository = Depends(get_organization_repository),
) -> Dict[str, Any]:
    organization = repo.update(organization_id, payload)
    return {"success": True, "data": organization.model_dump(mode="json")}


@router.delete("/{organization_id}")
def delete_organization(
    organization_id: int,
    repo: OrganizationRepository = Depends(get_organization_repository),
) -> Dict[str, Any]:
    repo.delete(organization_id)
    return {"success": True, "message": "Organization deleted successfully"}


__all__ = ["router"]
