from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..models import OwnerKind, ValueKind


@dataclass(frozen=True, slots=True)
class OwnerTable:
    kind: OwnerKind
    table: str
    id_column: str
    alias: str
    columns: Tuple[str, ...]
    sort_key: Tuple[str, ...]
    label: str


@dataclass(frozen=True, slots=True)
class ValueTable:
    kind: ValueKind
    table: str
    id_column: str
    link_table: str
    columns: Tuple[str, ...]
    # unique column used to reuse an existing row; None means always insert
    natural_key: Optional[str]
    link_attribute: str


PERSON = OwnerTable(
    kind=OwnerKind.PERSON,
    table="Person",
    id_column="person_id",
    alias="p",
    columns=(
        "first_name",
        "middle_name",
        "last_name",
        "birth_year",
        "birth_month",
        "birth_day",
        "preferred_language",
        "household_id",
    ),
    sort_key=("last_name", "first_name", "person_id"),
    label="Person",
)

ORGANIZATION = OwnerTable(
    kind=OwnerKind.ORGANIZATION,
    table="Organization",
    id_column="organization_id",
    alias="o",
    columns=("name", "website", "parent_organization_id"),
    sort_key=("name", "organization_id"),
    label="Organization",
)

OWNER_TABLES: Dict[OwnerKind, OwnerTable] = {
    OwnerKind.PERSON: PERSON,
    OwnerKind.ORGANIZATION: ORGANIZATION,
}

EMAIL = ValueTable(
    kind=ValueKind.EMAIL,
    table="Email",
    id_column="email_id",
    link_table="ContactEmail",
    columns=("email_address", "email_type"),
    natural_key="email_address",
    link_attribute="is_primary",
)

PHONE = ValueTable(
    kind=ValueKind.PHONE,
    table="Phone",
    id_column="phone_id",
    link_table="ContactPhone",
    columns=("country_code", "area_code", "local_number", "phone_type", "extension"),
    natural_key="local_number",
    link_attribute="is_primary",
)

ADDRESS = ValueTable(
    kind=ValueKind.ADDRESS,
    table="Address",
    id_column="address_id",
    link_table="ContactAddress",
    columns=(
        "address_line_1",
        "address_line_2",
        "address_line_3",
        "city_locality",
        "region_code",
        "postal_code",
        "country_iso_code",
    ),
    natural_key=None,
    link_attribute="address_type",
)

VALUE_TABLES: Dict[ValueKind, ValueTable] = {
    ValueKind.EMAIL: EMAIL,
    ValueKind.PHONE: PHONE,
    ValueKind.ADDRESS: ADDRESS,
}


__all__ = [
    "ADDRESS",
    "EMAIL",
    "ORGANIZATION",
    "OWNER_TABLES",
    "OwnerTable",
    "PERSON",
    "PHONE",
    "VALUE_TABLES",
    "ValueTable",
]
