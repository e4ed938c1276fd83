from __future__ import annotations

from typing import Any, ClassVar, Dict, Generic, Mapping, Optional, Tuple, Type, TypeVar, Union

from psycopg import errors as pg_errors
from psycopg.rows import dict_row
from pydantic import BaseModel, ValidationError

from ..db import Database
from ..errors import NotFound, ReferentialIntegrity, ValidationFailure
from ..logging import get_logger
from ..models import AddressType, NestedContacts, OwnerUpdate, Page, ValueKind
from .associations import AssociationManager
from .query import QueryBuilder, SearchFilter
from .tables import OwnerTable
from .values import ValueStore

logger = get_logger("contactbook.repository")

A = TypeVar("A", bound=BaseModel)
M = TypeVar("M", bound=BaseModel)

_COLLECTIONS = (
    (ValueKind.EMAIL, "emails"),
    (ValueKind.PHONE, "phones"),
    (ValueKind.ADDRESS, "addresses"),
)


def coerce_input(model: Type[M], data: Union[M, Mapping[str, Any]]) -> M:
    """Accept either a model instance or a plain mapping of its fields."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        raise ValidationFailure(errors=errors) from exc


class AggregateRepository(Generic[A]):
    """Create, read, update and delete one kind of owner with its contacts.

    Subclasses only describe the owner kind; every statement is generated from
    the ``owner`` table descriptor.
    """

    owner: ClassVar[OwnerTable]
    aggregate_model: ClassVar[Type[BaseModel]]
    create_model: ClassVar[Type[NestedContacts]]
    update_model: ClassVar[Type[OwnerUpdate]]
    search_model: ClassVar[Type[BaseModel]]
    filters: ClassVar[Tuple[SearchFilter, ...]]
    default_address_type: ClassVar[AddressType]

    def __init__(
        self,
        db: Database,
        *,
        values: Optional[ValueStore] = None,
        associations: Optional[AssociationManager] = None,
        query: Optional[QueryBuilder] = None,
    ) -> None:
        self.db = db
        self.values = values or ValueStore()
        self.associations = associations or AssociationManager()
        self.query = query or QueryBuilder(self.owner, self.filters)

    # Reads

    def get_by_id(self, owner_id: int) -> Optional[A]:
        """Return the full aggregate, or ``None`` when no such owner exists."""
        with self.db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                return self._load(cur, owner_id)

    def get_all(self, page: int = 1, limit: int = 20) -> Page[A]:
        return self._page({}, page, limit)

    def search(self, filters: Union[BaseModel, Mapping[str, Any]], page: int = 1, limit: int = 20) -> Page[A]:
        criteria = coerce_input(self.search_model, filters)
        return self._page(criteria.model_dump(), page, limit)

    def _page(self, values: Mapping[str, Any], page: int, limit: int) -> Page[A]:
        query = self.query.build(values, page, limit)
        with self.db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query.count_sql, query.count_params)
                total = int(cur.fetchone()["total"])
                cur.execute(query.page_sql, query.page_params)
                rows = cur.fetchall()
                items = [self._assemble(cur, row) for row in rows]
        return Page[self.aggregate_model](data=items, total=total, page=page, limit=limit)

    def _load(self, cur, owner_id: int) -> Optional[A]:
        cur.execute(
            f"SELECT * FROM {self.owner.table} WHERE {self.owner.id_column} = %s",
            (owner_id,),
        )
        row = cur.fetchone()
        if row is None:
            return None
        return self._assemble(cur, row)

    def _assemble(self, cur, row: Mapping[str, Any]) -> A:
        owner_id = row[self.owner.id_column]
        payload: Dict[str, Any] = {
            column: row.get(column) for column in (self.owner.id_column, *self.owner.columns)
        }
        for value_kind, field_name in _COLLECTIONS:
            payload[field_name] = [
                {**value, **attributes}
                for value, attributes in self.associations.list_for_owner(cur, owner_id, self.owner.kind, value_kind)
            ]
        return self.aggregate_model.model_validate(payload)

    # Writes

    def create(self, data: Union[NestedContacts, Mapping[str, Any]]) -> A:
        """Insert the owner and its nested contacts in one transaction, then re-read it."""
        record = coerce_input(self.create_model, data)
        fields = record.model_dump(include=set(self.owner.columns))
        columns = list(fields)
        placeholders = ", ".join(["%s"] * len(columns))

        with self.db.connection() as conn:
            with conn.transaction():
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO {self.owner.table} ({', '.join(columns)})
                        VALUES ({placeholders})
                        RETURNING {self.owner.id_column}
                        """,
                        [fields[column] for column in columns],
                    )
                    owner_id = cur.fetchone()[self.owner.id_column]
                    self._attach_contacts(cur, owner_id, record)
            with conn.cursor(row_factory=dict_row) as cur:
                aggregate = self._load(cur, owner_id)

        logger.info(
            "owner_created",
            owner_kind=self.owner.kind.value,
            owner_id=owner_id,
            emails=len(record.emails),
            phones=len(record.phones),
            addresses=len(record.addresses),
        )
        return aggregate

    def _attach_contacts(self, cur, owner_id: int, record: NestedContacts) -> None:
        for email in record.emails:
            value_id = self.values.resolve(cur, ValueKind.EMAIL, email.model_dump())
            self.associations.link(
                cur, owner_id, self.owner.kind, ValueKind.EMAIL, value_id, {"is_primary": email.is_primary}
            )
        for phone in record.phones:
            value_id = self.values.resolve(cur, ValueKind.PHONE, phone.model_dump())
            self.associations.link(
                cur, owner_id, self.owner.kind, ValueKind.PHONE, value_id, {"is_primary": phone.is_primary}
            )
        for address in record.addresses:
            value_id = self.values.resolve(cur, ValueKind.ADDRESS, address.model_dump())
            self.associations.link(
                cur,
                owner_id,
                self.owner.kind,
                ValueKind.ADDRESS,
                value_id,
                {"address_type": address.address_type or self.default_address_type},
            )

    def update(self, owner_id: int, data: Union[OwnerUpdate, Mapping[str, Any]]) -> A:
        """Write only the scalar fields present in ``data``; nested contacts are untouched."""
        patch = coerce_input(self.update_model, data)
        changes = {column: value for column, value in patch.changes().items() if column in self.owner.columns}

        with self.db.connection() as conn:
            with conn.transaction():
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {self.owner.id_column} FROM {self.owner.table} WHERE {self.owner.id_column} = %s FOR UPDATE",
                        (owner_id,),
                    )
                    if cur.fetchone() is None:
                        raise NotFound(self.owner.label, owner_id)
                    if changes:
                        assignments = ", ".join(f"{column} = %s" for column in changes)
                        cur.execute(
                            f"UPDATE {self.owner.table} SET {assignments} WHERE {self.owner.id_column} = %s",
                            [*changes.values(), owner_id],
                        )
            with conn.cursor(row_factory=dict_row) as cur:
                aggregate = self._load(cur, owner_id)

        if aggregate is None:
            raise NotFound(self.owner.label, owner_id)
        logger.info(
            "owner_updated",
            owner_kind=self.owner.kind.value,
            owner_id=owner_id,
            fields=sorted(changes),
        )
        return aggregate

    def delete(self, owner_id: int) -> None:
        """Delete the owner row only; its links and values are left in place."""
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                try:
                    cur.execute(
                        f"DELETE FROM {self.owner.table} WHERE {self.owner.id_column} = %s",
                        (owner_id,),
                    )
                except pg_errors.ForeignKeyViolation as exc:
                    logger.warning(
                        "owner_delete_blocked",
                        owner_kind=self.owner.kind.value,
                        owner_id=owner_id,
                        constraint=exc.diag.constraint_name,
                    )
                    raise ReferentialIntegrity(
                        f"{self.owner.label} is still referenced",
                        constraint=exc.diag.constraint_name,
                        detail=exc.diag.message_detail or str(exc),
                    ) from exc
                if cur.rowcount == 0:
                    raise NotFound(self.owner.label, owner_id)
        logger.info("owner_deleted", owner_kind=self.owner.kind.value, owner_id=owner_id)


__all__ = ["AggregateRepository", "coerce_input"]
