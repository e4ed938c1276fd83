from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from ..errors import ValidationFailure
from ..models import ValueKind
from .tables import VALUE_TABLES, OwnerTable


@dataclass(frozen=True, slots=True)
class SearchFilter:
    """One named, optional search input.

    ``column`` lives on the owner table unless ``value_kind`` is set, in which
    case it lives on that value table and the owner is joined to it through
    its association table.
    """

    name: str
    column: str
    value_kind: Optional[ValueKind] = None
    exact: bool = False


PERSON_FILTERS: Tuple[SearchFilter, ...] = (
    SearchFilter("first_name", "first_name"),
    SearchFilter("last_name", "last_name"),
    SearchFilter("email", "email_address", value_kind=ValueKind.EMAIL),
    SearchFilter("phone", "local_number", value_kind=ValueKind.PHONE),
    SearchFilter("household_id", "household_id", exact=True),
)

ORGANIZATION_FILTERS: Tuple[SearchFilter, ...] = (
    SearchFilter("name", "name"),
    SearchFilter("website", "website"),
)


@dataclass(frozen=True, slots=True)
class PageQuery:
    count_sql: str
    count_params: Tuple[Any, ...]
    page_sql: str
    page_params: Tuple[Any, ...]


def page_offset(page: int, limit: int) -> int:
    if page < 1:
        raise ValidationFailure(errors=[{"field": "page", "message": "page must be at least 1"}])
    if limit < 1:
        raise ValidationFailure(errors=[{"field": "limit", "message": "limit must be at least 1"}])
    return (page - 1) * limit


class QueryBuilder:
    """Compose the count and page statements for an owner listing.

    Filters are conjoined with AND. A filter whose value is ``None`` is left
    out entirely; an empty string is kept and matches every row.
    """

    def __init__(self, owner: OwnerTable, filters: Sequence[SearchFilter]) -> None:
        self.owner = owner
        self.filters = {item.name: item for item in filters}

    def build(self, values: Mapping[str, Any], page: int, limit: int) -> PageQuery:
        offset = page_offset(page, limit)
        alias = self.owner.alias
        owner_id = f"{alias}.{self.owner.id_column}"

        joins: List[str] = []
        join_params: List[Any] = []
        joined: set[ValueKind] = set()
        clauses: List[str] = []
        where_params: List[Any] = []

        for name, spec in self.filters.items():
            value = values.get(name)
            if value is None:
                continue
            if spec.value_kind is not None:
                table = VALUE_TABLES[spec.value_kind]
                link_alias = f"l_{spec.value_kind.value.lower()}"
                value_alias = f"v_{spec.value_kind.value.lower()}"
                if spec.value_kind not in joined:
                    joined.add(spec.value_kind)
                    joins.append(
                        f"JOIN {table.link_table} {link_alias} "
                        f"ON {link_alias}.contact_id = {owner_id} AND {link_alias}.contact_entity_type = %s "
                        f"JOIN {table.table} {value_alias} ON {value_alias}.{table.id_column} = {link_alias}.{table.id_column}"
                    )
                    join_params.append(self.owner.kind.value)
                column = f"{value_alias}.{spec.column}"
            else:
                column = f"{alias}.{spec.column}"

            if spec.exact:
                clauses.append(f"{column} = %s")
                where_params.append(value)
            else:
                clauses.append(f"{column} ILIKE %s")
                where_params.append(f"%{value}%")

        source = f"FROM {self.owner.table} {alias}"
        if joins:
            source += " " + " ".join(joins)
        if clauses:
            source += " WHERE " + " AND ".join(clauses)
        params = tuple(join_params + where_params)

        # a joined owner can match several values; count and list it once
        if joins:
            count_sql = f"SELECT COUNT(DISTINCT {owner_id}) AS total {source}"
            select = f"SELECT DISTINCT {alias}.*"
        else:
            count_sql = f"SELECT COUNT(*) AS total {source}"
            select = f"SELECT {alias}.*"
        order_by = ", ".join(f"{alias}.{column}" for column in self.owner.sort_key)
        page_sql = f"{select} {source} ORDER BY {order_by} LIMIT %s OFFSET %s"

        return PageQuery(
            count_sql=count_sql,
            count_params=params,
            page_sql=page_sql,
            page_params=params + (limit, offset),
        )


__all__ = [
    "ORGANIZATION_FILTERS",
    "PERSON_FILTERS",
    "PageQuery",
    "QueryBuilder",
    "SearchFilter",
    "page_offset",
]
