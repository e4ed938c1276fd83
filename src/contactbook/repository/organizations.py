from __future__ import annotations

from ..models import AddressType, Organization, OrganizationCreate, OrganizationSearch, OrganizationUpdate
from .aggregates import AggregateRepository
from .query import ORGANIZATION_FILTERS
from .tables import ORGANIZATION


class OrganizationRepository(AggregateRepository[Organization]):
    """Organizations, optionally nested under a parent organization.

    Names are unique, so a second create with the same name fails with
    ``Conflict``. Parent links are not checked for cycles.
    """

    owner = ORGANIZATION
    aggregate_model = Organization
    create_model = OrganizationCreate
    update_model = OrganizationUpdate
    search_model = OrganizationSearch
    filters = ORGANIZATION_FILTERS
    default_address_type = AddressType.OFFICE


__all__ = ["OrganizationRepository"]
