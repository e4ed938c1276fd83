from .associations import AssociationManager
from .lookups import LookupRepository
from .organizations import OrganizationRepository
from .people import PersonRepository
from .query import PageQuery, QueryBuilder, SearchFilter
from .values import ValueStore

__all__ = [
    "AssociationManager",
    "LookupRepository",
    "OrganizationRepository",
    "PageQuery",
    "PersonRepository",
    "QueryBuilder",
    "SearchFilter",
    "ValueStore",
]
