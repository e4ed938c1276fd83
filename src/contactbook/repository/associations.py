from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

from psycopg import errors as pg_errors

from ..errors import DuplicateAssociation
from ..logging import get_logger
from ..models import OwnerKind, ValueKind
from .tables import VALUE_TABLES

logger = get_logger("contactbook.associations")

# How an address link reports ``is_primary``. A person's address is primary when
# it is the primary address of the person's household; organizations have none.
_ADDRESS_PRIMARY_SQL: Dict[OwnerKind, str] = {
    OwnerKind.PERSON: """
        COALESCE(v.address_id = (
            SELECT h.primary_address_id
            FROM Household h
            JOIN Person hp ON hp.household_id = h.household_id
            WHERE hp.person_id = l.contact_id
        ), false)
    """,
    OwnerKind.ORGANIZATION: "false",
}


def _list_sql(value_kind: ValueKind, owner_kind: OwnerKind) -> str:
    spec = VALUE_TABLES[value_kind]
    columns = ", ".join(f"v.{column}" for column in (spec.id_column, *spec.columns))
    if value_kind is ValueKind.ADDRESS:
        return f"""
            SELECT {columns}, l.address_type, {_ADDRESS_PRIMARY_SQL[owner_kind]} AS is_primary
            FROM {spec.table} v
            JOIN {spec.link_table} l ON l.{spec.id_column} = v.{spec.id_column}
            WHERE l.contact_id = %s AND l.contact_entity_type = %s
            ORDER BY v.{spec.id_column}
        """
    return f"""
        SELECT {columns}, l.is_primary
        FROM {spec.table} v
        JOIN {spec.link_table} l ON l.{spec.id_column} = v.{spec.id_column}
        WHERE l.contact_id = %s AND l.contact_entity_type = %s
        ORDER BY l.is_primary DESC, v.{spec.id_column}
    """


class AssociationManager:
    """Links owners to contact values through the ``Contact*`` tables.

    Owners are told apart by the ``contact_entity_type`` discriminant stored on
    each link row, so one set of value and link tables serves every owner kind.
    """

    def link(
        self,
        cur,
        owner_id: int,
        owner_kind: OwnerKind,
        value_kind: ValueKind,
        value_id: int,
        attributes: Mapping[str, Any],
    ) -> None:
        spec = VALUE_TABLES[value_kind]
        attribute = attributes.get(spec.link_attribute)
        if value_kind is ValueKind.ADDRESS:
            attribute = getattr(attribute, "value", attribute)
        else:
            attribute = bool(attribute)
        try:
            cur.execute(
                f"""
                INSERT INTO {spec.link_table} (contact_id, {spec.id_column}, contact_entity_type, {spec.link_attribute})
                VALUES (%s, %s, %s, %s)
                """,
                (owner_id, value_id, owner_kind.value, attribute),
            )
        except pg_errors.UniqueViolation as exc:
            raise DuplicateAssociation(
                owner_kind.value,
                owner_id,
                value_kind.value,
                value_id,
                constraint=exc.diag.constraint_name,
            ) from exc
        logger.debug(
            "contact_value_linked",
            owner_kind=owner_kind.value,
            owner_id=owner_id,
            value_kind=value_kind.value,
            value_id=value_id,
            **{spec.link_attribute: attribute},
        )

    def list_for_owner(
        self,
        cur,
        owner_id: int,
        owner_kind: OwnerKind,
        value_kind: ValueKind,
    ) -> List[Tuple[Dict[str, Any], Dict[str, Any]]]:
        """Return ``(value, attributes)`` pairs linked to the owner.

        Emails and phones come primary-first, then by value id; addresses come
        by value id only.
        """
        spec = VALUE_TABLES[value_kind]
        cur.execute(_list_sql(value_kind, owner_kind), (owner_id, owner_kind.value))
        pairs: List[Tuple[Dict[str, Any], Dict[str, Any]]] = []
        for row in cur.fetchall():
            value = {column: row[column] for column in (spec.id_column, *spec.columns)}
            attributes = {key: row[key] for key in row if key not in value}
            pairs.append((value, attributes))
        return pairs


__all__ = ["AssociationManager"]
