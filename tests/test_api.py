"""Tests for the HTTP API."""

from __future__ import annotations

import csv
import io

import pytest
from fastapi.testclient import TestClient

from journal_tracker.api.app import build_app
from journal_tracker.shared.errors import PersistenceError
from journal_tracker.storage import LocalJsonStore
from journal_tracker.tracker.service import TrackerService

from .conftest import FakeCatalog


class UnreadableStore:
    name = "unreadable"

    def read_all(self):
        raise PersistenceError("backend offline")

    def read_snapshot(self):
        raise PersistenceError("backend offline")

    def write_all(self, records, expected_revision=None):
        raise PersistenceError("backend offline")


@pytest.fixture
def client(store: LocalJsonStore, config, seeded_records):
    store.write_all(seeded_records)
    catalog = FakeCatalog([{"issn": "1234-567X", "title": "Annals of Tests"}])
    with TestClient(build_app(TrackerService(store, config, catalog))) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "backend": "local", "refresh": "idle"}


def test_list_defaults_to_changed_first(client: TestClient) -> None:
    response = client.get("/api/journals")

    payload = response.json()
    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-cache"
    assert payload["items"][0]["issn"] == "00280836"
    assert payload["items"][0]["changed"] is True
    assert payload["items"][0]["previous_title"] == "Nature London"
    assert payload["summary"] == {
        "total": 3,
        "updated_count": 1,
        "unchanged_count": 2,
    }
    assert payload["page"] == {"total": 3, "limit": 100, "offset": 0, "has_more": False}


def test_list_filters_and_sort(client: TestClient) -> None:
    by_title = client.get("/api/journals", params={"sort": "title"}).json()
    by_date = client.get(
        "/api/journals", params={"from": "2025-02-01", "to": "2025-02-28"}
    ).json()
    by_issn = client.get("/api/journals", params={"q": "0036-8075"}).json()
    by_letter = client.get("/api/journals", params={"letter": "A"}).json()
    changed = client.get("/api/journals", params={"changed_only": "true"}).json()

    assert [item["title"] for item in by_title["items"]] == [
        "Annals of Testing",
        "Nature",
        "Science",
    ]
    assert {item["issn"] for item in by_date["items"]} == {"00280836", "1234567X"}
    assert [item["title"] for item in by_issn["items"]] == ["Science"]
    assert [item["title"] for item in by_letter["items"]] == ["Annals of Testing"]
    assert changed["summary"]["total"] == 1


def test_list_pagination(client: TestClient) -> None:
    payload = client.get(
        "/api/journals", params={"sort": "issn", "limit": 2, "offset": 1}
    ).json()

    assert [item["issn"] for item in payload["items"]] == ["00368075", "1234567X"]
    assert payload["page"]["has_more"] is False
    assert payload["summary"]["total"] == 3


@pytest.mark.parametrize(
    "params",
    [{"sort": "publisher"}, {"from": "2025-03-01", "to": "2025-01-01"}],
)
def test_list_rejects_bad_params(client: TestClient, params) -> None:
    assert client.get("/api/journals", params=params).status_code == 400


def test_all_and_summary(client: TestClient) -> None:
    everything = client.get("/api/journals/all").json()
    summary = client.get("/api/journals/summary").json()

    assert [item["issn"] for item in everything] == [
        "00368075",
        "00280836",
        "1234567X",
    ]
    assert summary["updated_count"] == 1


def test_get_journal_by_any_notation(client: TestClient) -> None:
    response = client.get("/api/journals/0028-0836")

    assert response.status_code == 200
    assert response.json()["title"] == "Nature"
    assert client.get("/api/journals/9999-9999").status_code == 404


def test_export_csv(client: TestClient) -> None:
    full = client.get("/api/journals/export.csv")
    changes = client.get("/api/journals/export.csv", params={"changed_only": "true"})

    assert full.headers["content-type"].startswith("text/csv")
    assert 'filename="all_journals.csv"' in full.headers["content-disposition"]
    assert 'filename="changes_only.csv"' in changes.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(changes.text)))
    assert rows == [
        ["ISSN", "Title", "Previous Title", "Status"],
        ["00280836", "Nature", "Nature London", "Updated"],
    ]


def test_refresh_endpoint(client: TestClient) -> None:
    response = client.post("/api/refresh")

    payload = response.json()
    assert response.status_code == 200
    assert payload["status"] == "updated"
    assert payload["fetched"] == 1
    assert payload["changes"][0]["old_title"] == "Annals of Testing"
    assert payload["changes"][0]["new_title"] == "Annals of Tests"
    updated = client.get("/api/journals/1234567X").json()
    assert updated["previous_title"] == "Annals of Testing"


def test_store_failure_maps_to_bad_gateway(config) -> None:
    with TestClient(build_app(TrackerService(UnreadableStore(), config))) as client:
        response = client.get("/api/journals/all")

    assert response.status_code == 502
    assert response.json() == {"error": "backend offline"}


def test_catalog_lookup(client: TestClient) -> None:
    response = client.get("/api/catalog", params={"issns": "0036-8075, 1234-567x"})

    assert response.status_code == 200
    assert response.json() == {
        "issns": ["00368075", "1234567X"],
        "items": [{"issn": "1234-567X", "title": "Annals of Tests"}],
    }


@pytest.mark.parametrize("params", [{}, {"issns": " , ,"}])
def test_catalog_lookup_requires_issns(client: TestClient, params) -> None:
    response = client.get("/api/catalog", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "No valid ISSNs provided"}


def test_catalog_lookup_without_api_key(store: LocalJsonStore, config) -> None:
    with TestClient(build_app(TrackerService(store, config))) as client:
        response = client.get("/api/catalog", params={"issns": "0036-8075"})

    assert response.status_code == 503


def test_catalog_lookup_leaves_master_list(client: TestClient, store) -> None:
    before = store.read_all()

    client.get("/api/catalog", params={"issns": "1234-567X"})

    assert store.read_all() == before
