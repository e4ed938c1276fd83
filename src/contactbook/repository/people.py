from __future__ import annotations

from ..models import AddressType, Person, PersonCreate, PersonSearch, PersonUpdate
from .aggregates import AggregateRepository
from .query import PERSON_FILTERS
from .tables import PERSON


class PersonRepository(AggregateRepository[Person]):
    """People and their shared emails, phones and addresses.

    Listings are ordered by last name, then first name. Searching by ``email``
    or ``phone`` joins through the person's links; ``household_id`` is matched
    exactly.
    """

    owner = PERSON
    aggregate_model = Person
    create_model = PersonCreate
    update_model = PersonUpdate
    search_model = PersonSearch
    filters = PERSON_FILTERS
    default_address_type = AddressType.HOME


__all__ = ["PersonRepository"]
