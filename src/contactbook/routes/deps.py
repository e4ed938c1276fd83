from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Query, Request

from ..config import ContactBookSettings
from ..db import Database
from ..errors import ValidationFailure
from ..repository import LookupRepository, OrganizationRepository, PersonRepository


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_app_settings(request: Request) -> ContactBookSettings:
    return request.app.state.settings


def get_person_repository(db: Database = Depends(get_database)) -> PersonRepository:
    return PersonRepository(db)


def get_organization_repository(db: Database = Depends(get_database)) -> OrganizationRepository:
    return OrganizationRepository(db)


def get_lookup_repository(db: Database = Depends(get_database)) -> LookupRepository:
    return LookupRepository(db)


def get_pagination(
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    settings: ContactBookSettings = Depends(get_app_settings),
) -> Pagination:
    if limit is None:
        limit = settings.default_page_size
    if limit > settings.max_page_size:
        raise ValidationFailure(
            errors=[{"field": "limit", "message": f"limit must be at most {settings.max_page_size}"}]
        )
    return Pagination(page=page, limit=limit)


__all__ = [
    "Pagination",
    "get_app_settings",
    "get_database",
    "get_lookup_repository",
    "get_organization_repository",
    "get_pagination",
    "get_person_repository",
]
