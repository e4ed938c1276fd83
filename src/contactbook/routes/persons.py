from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..models import PersonCreate, PersonSearch, PersonUpdate
from ..repository import PersonRepository
from .deps import Pagination, get_pagination, get_person_repository

router = APIRouter(prefix="/api/persons", tags=["persons"])


def get_person_filters(
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    household_id: Optional[int] = None,
) -> PersonSearch:
    return PersonSearch(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        household_id=household_id,
    )


@router.get("")
def list_persons(
    paging: Pagination = Depends(get_pagination),
    repo: PersonRepository = Depends(get_person_repository),
) -> Dict[str, Any]:
    result = repo.get_all(paging.page, paging.limit)
    return {"success": True, **result.model_dump(mode="json")}


@router.get("/search")
def search_persons(
    filters: PersonSearch = Depends(get_person_filters),
    paging: Pagination = Depends(get_pagination),
    repo: PersonRepository = Depends(get_person_repository),
) -> Dict[str, Any]:
    result = repo.search(filters, paging.page, paging.limit)
    return {"success": True, **result.model_dump(mode="json")}


@router.get("/{person_id}")
def get_person(person_id: int, repo: PersonRepository = Depends(get_person_repository)):
    person = repo.get_by_id(person_id)
    if person is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": "Person not found"},
        )
    return {"success": True, "data": person.model_dump(mode="json")}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_person(payload: PersonCreate, repo: PersonRepository = Depends(get_person_repository)) -> Dict[str, Any]:
    person = repo.create(payload)
    return {"success": True, "data": person.model_dump(mode="json")}


@router.put("/{person_id}")
def update_person(
    person_id: int,
    payload: PersonUpdate,
    repo: PersonRepository = Depends(get_person_repository),
) -> Dict[str, Any]:
    person = repo.update(person_id, payload)
    return {"success": True, "data": person.model_dump(mode="json")}


@router.delete("/{person_id}")
def delete_person(person_id: int, repo: PersonRepository = Depends(get_person_repository)) -> Dict[str, Any]:
    repo.delete(person_id)
    return {"success": True, "message": "Person deleted successfully"}


__all__ = ["router"]
