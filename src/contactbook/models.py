from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class OwnerKind(str, Enum):
    PERSON = "PERSON"
    ORGANIZATION = "ORGANIZATION"


class ValueKind(str, Enum):
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    ADDRESS = "ADDRESS"


class EmailType(str, Enum):
    WORK = "WORK"
    PERSONAL = "PERSONAL"
    BILLING = "BILLING"
    OTHER = "OTHER"


class PhoneType(str, Enum):
    MOBILE = "MOBILE"
    OFFICE = "OFFICE"
    HOME = "HOME"
    FAX = "FAX"
    OTHER = "OTHER"


class AddressType(str, Enum):
    SHIPPING = "SHIPPING"
    BILLING = "BILLING"
    HOME = "HOME"
    OFFICE = "OFFICE"
    OTHER = "OTHER"


# Nested contact inputs


class EmailInput(BaseModel):
    email_address: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    email_type: EmailType
    is_primary: bool = False


class PhoneInput(BaseModel):
    country_code: Optional[str] = Field(default=None, max_length=10)
    area_code: Optional[str] = Field(default=None, max_length=10)
    local_number: str = Field(min_length=1, max_length=20)
    phone_type: PhoneType
    extension: Optional[str] = Field(default=None, max_length=10)
    is_primary: bool = False


class AddressInput(BaseModel):
    address_line_1: str = Field(min_length=1, max_length=255)
    address_line_2: Optional[str] = Field(default=None, max_length=255)
    address_line_3: Optional[str] = Field(default=None, max_length=255)
    city_locality: str = Field(min_length=1, max_length=100)
    region_code: Optional[str] = Field(default=None, max_length=10)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    country_iso_code: str = Field(min_length=2, max_length=2)
    address_type: Optional[AddressType] = None


class NestedContacts(BaseModel):
    emails: List[EmailInput] = Field(default_factory=list)
    phones: List[PhoneInput] = Field(default_factory=list)
    addresses: List[AddressInput] = Field(default_factory=list)


# Stored contact values, as reported inside an aggregate


class Email(BaseModel):
    email_id: int
    email_address: str
    email_type: EmailType
    is_primary: bool = False


class Phone(BaseModel):
    phone_id: int
    country_code: Optional[str] = None
    area_code: Optional[str] = None
    local_number: str
    phone_type: PhoneType
    extension: Optional[str] = None
    is_primary: bool = False


class Address(BaseModel):
    address_id: int
    address_line_1: str
    address_line_2: Optional[str] = None
    address_line_3: Optional[str] = None
    city_locality: str
    region_code: Optional[str] = None
    postal_code: Optional[str] = None
    country_iso_code: str
    address_type: AddressType
    is_primary: bool = False


class ContactCollections(BaseModel):
    emails: List[Email] = Field(default_factory=list)
    phones: List[Phone] = Field(default_factory=list)
    addresses: List[Address] = Field(default_factory=list)


class OwnerUpdate(BaseModel):
    """Partial owner update.

    Only fields the caller actually supplied end up in ``changes()``; an
    explicit ``None``, ``0`` or ``""`` is written as given.
    """

    model_config = ConfigDict(extra="ignore")

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(include=self.model_fields_set)


# Person


class PersonFields(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    middle_name: Optional[str] = Field(default=None, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    birth_year: Optional[int] = Field(default=None, ge=1900)
    birth_month: Optional[int] = Field(default=None, ge=1, le=12)
    birth_day: Optional[int] = Field(default=None, ge=1, le=31)
    preferred_language: Optional[str] = Field(default=None, max_length=5)
    household_id: Optional[int] = Field(default=None, gt=0)


class PersonCreate(PersonFields, NestedContacts):
    pass


class PersonUpdate(OwnerUpdate):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    middle_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    birth_year: Optional[int] = Field(default=None, ge=1900)
    birth_month: Optional[int] = Field(default=None, ge=1, le=12)
    birth_day: Optional[int] = Field(default=None, ge=1, le=31)
    preferred_language: Optional[str] = Field(default=None, max_length=5)
    household_id: Optional[int] = Field(default=None, gt=0)


class Person(ContactCollections):
    person_id: int
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    birth_year: Optional[int] = None
    birth_month: Optional[int] = None
    birth_day: Optional[int] = None
    preferred_language: Optional[str] = None
    household_id: Optional[int] = None


class PersonSearch(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    household_id: Optional[int] = None


# Organization


class OrganizationFields(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    website: Optional[str] = Field(default=None, max_length=255)
    parent_organization_id: Optional[int] = Field(default=None, gt=0)


class OrganizationCreate(OrganizationFields, NestedContacts):
    pass


class OrganizationUpdate(OwnerUpdate):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    website: Optional[str] = Field(default=None, max_length=255)
    parent_organization_id: Optional[int] = Field(default=None, gt=0)


class Organization(ContactCollections):
    organization_id: int
    name: str
    website: Optional[str] = None
    parent_organization_id: Optional[int] = None


class OrganizationSearch(BaseModel):
    name: Optional[str] = None
    website: Optional[str] = None


# Lookups


class Country(BaseModel):
    iso_code_2: str
    country_name: str


class Region(BaseModel):
    country_iso_code: str
    region_code: str
    name: str
    type: Optional[str] = None


class Page(BaseModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    total: int
    page: int
    limit: int


__all__ = [
    "Address",
    "AddressInput",
    "AddressType",
    "Country",
    "Email",
    "EmailInput",
    "EmailType",
    "Organization",
    "OrganizationCreate",
    "OrganizationSearch",
    "OrganizationUpdate",
    "OwnerKind",
    "OwnerUpdate",
    "Page",
    "Person",
    "PersonCreate",
    "PersonSearch",
    "PersonUpdate",
    "Phone",
    "PhoneInput",
    "PhoneType",
    "Region",
    "ValueKind",
]
