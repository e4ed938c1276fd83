from __future__ import annotations

from fastapi import status
from fastapi.testclient import TestClient

from contactbook.app import create_app
from contactbook.db import Database
from contactbook.errors import Conflict, Internal, NotFound, ReferentialIntegrity
from contactbook.models import Country, Organization, Page, Person, Region
from contactbook.routes.deps import (
    get_lookup_repository,
    get_organization_repository,
    get_person_repository,
)

from conftest import ScriptedPool

ANN = Person(person_id=1, first_name="Ann", last_name="Lee")
ACME = Organization(organization_id=4, name="Acme")


class DummyPersonRepository:
    def __init__(self):
        self.calls = []

    def get_all(self, page, limit):
        self.calls.append(("get_all", page, limit))
        return Page[Person](data=[ANN], total=1, page=page, limit=limit)

    def search(self, filters, page, limit):
        self.calls.append(("search", filters.model_dump(), page, limit))
        return Page[Person](data=[], total=0, page=page, limit=limit)

    def get_by_id(self, person_id):
        return ANN if person_id == 1 else None

    def create(self, payload):
        self.calls.append(("create", payload))
        return ANN

    def update(self, person_id, payload):
        if person_id != 1:
            raise NotFound("Person", person_id)
        self.calls.append(("update", payload.changes()))
        return ANN

    def delete(self, person_id):
        if person_id != 1:
            raise NotFound("Person", person_id)


class DummyOrganizationRepository:
    def get_all(self, page, limit):
        return Page[Organization](data=[ACME], total=1, page=page, limit=limit)

    def search(self, filters, page, limit):
        return Page[Organization](data=[ACME], total=1, page=page, limit=limit)

    def get_by_id(self, organization_id):
        return None

    def create(self, payload):
        raise Conflict(constraint="uq_organization_name", detail="Key (name)=(Acme) already exists.")

    def update(self, organization_id, payload):
        raise Internal("Database operation failed")

    def delete(self, organization_id):
        raise ReferentialIntegrity("Organization is still referenced")


class DummyLookupRepository:
    def countries(self):
        return [Country(iso_code_2="CA", country_name="Canada")]

    def regions(self):
        return [Region(country_iso_code="CA", region_code="ON", name="Ontario", type="province")]

    def regions_for_country(self, country_code):
        return [] if country_code.upper() != "CA" else self.regions()


def _client(settings, people=None):
    app = create_app(settings, db=Database(settings, pool=ScriptedPool([])))
    people = people or DummyPersonRepository()
    app.dependency_overrides[get_person_repository] = lambda: people
    app.dependency_overrides[get_organization_repository] = DummyOrganizationRepository
    app.dependency_overrides[get_lookup_repository] = DummyLookupRepository
    return TestClient(app)


def test_health_reports_running(settings):
    response = _client(settings).get("/api/health")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Contact Service API is running"
    assert "timestamp" in body


def test_list_persons_uses_default_page_size(settings):
    people = DummyPersonRepository()

    response = _client(settings, people).get("/api/persons")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "success": True,
        "data": [ANN.model_dump(mode="json")],
        "total": 1,
        "page": 1,
        "limit": settings.default_page_size,
    }
    assert people.calls == [("get_all", 1, settings.default_page_size)]


def test_list_rejects_limit_above_maximum(settings):
    response = _client(settings).get("/api/persons", params={"limit": settings.max_page_size + 1})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["success"] is False
    assert body["details"][0]["field"] == "limit"


def test_list_rejects_zero_page(settings):
    response = _client(settings).get("/api/organizations", params={"page": 0})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Validation Error"


def test_search_persons_passes_only_supplied_filters(settings):
    people = DummyPersonRepository()

    response = _client(settings, people).get(
        "/api/persons/search", params={"email": "example.com", "page": 2, "limit": 5}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == []
    _, filters, page, limit = people.calls[0]
    assert filters["email"] == "example.com"
    assert filters["last_name"] is None
    assert (page, limit) == (2, 5)


def test_get_person_not_found(settings):
    response = _client(settings).get("/api/persons/99")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"success": False, "error": "Person not found"}


def test_get_organization_not_found(settings):
    response = _client(settings).get("/api/organizations/5")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Organization not found"


def test_create_person_returns_created(settings):
    people = DummyPersonRepository()

    response = _client(settings, people).post(
        "/api/persons",
        json={
            "first_name": "Ann",
            "last_name": "Lee",
            "emails": [{"email_address": "ann@example.com", "email_type": "WORK"}],
        },
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["person_id"] == 1
    payload = people.calls[0][1]
    assert payload.emails[0].email_address == "ann@example.com"


def test_create_person_validation_error_lists_fields(settings):
    response = _client(settings).post("/api/persons", json={"first_name": "Ann"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Validation Error"
    assert {"field": "last_name", "message": "Field required"} in body["details"]


def test_create_person_rejects_bad_email_type(settings):
    response = _client(settings).post(
        "/api/persons",
        json={
            "first_name": "Ann",
            "last_name": "Lee",
            "emails": [{"email_address": "ann@example.com", "email_type": "CARRIER_PIGEON"}],
        },
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert body_fields(response) == ["emails.0.email_type"]


def body_fields(response):
    return [item["field"] for item in response.json()["details"]]


def test_update_person_passes_explicit_nulls(settings):
    people = DummyPersonRepository()

    response = _client(settings, people).put("/api/persons/1", json={"middle_name": None})

    assert response.status_code == status.HTTP_200_OK
    assert people.calls == [("update", {"middle_name": None})]


def test_update_missing_person_is_404(settings):
    response = _client(settings).put("/api/persons/2", json={"first_name": "Bo"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Person not found"


def test_delete_person(settings):
    response = _client(settings).delete("/api/persons/1")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "message": "Person deleted successfully"}


def test_duplicate_organization_name_is_conflict(settings):
    response = _client(settings).post("/api/organizations", json={"name": "Acme"})

    assert response.status_code == status.HTTP_409_CONFLICT
    body = response.json()
    assert body["error"] == "Duplicate entry"
    assert "already exists" in body["detail"]


def test_delete_referenced_organization_is_400(settings):
    response = _client(settings).delete("/api/organizations/4")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Organization is still referenced"


def test_internal_errors_hide_details(settings):
    response = _client(settings).put("/api/organizations/4", json={"name": "New"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "error": "Internal server error"}


def test_lookups(settings):
    client = _client(settings)

    countries = client.get("/api/lookups/countries").json()
    assert countries == {"success": True, "data": [{"iso_code_2": "CA", "country_name": "Canada"}]}

    regions = client.get("/api/lookups/regions/ca").json()
    assert regions["data"][0]["region_code"] == "ON"

    assert client.get("/api/lookups/regions/zz").json() == {"success": True, "data": []}
