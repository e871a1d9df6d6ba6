"""Tests for the HTTP API."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from donorcodes.server import create_app


@pytest.fixture
def client(donors) -> TestClient:
    return TestClient(create_app(donors=donors))


def test_generate(client: TestClient):
    resp = client.post("/api/codes/generate", json={"entity_name": "World Health Organization"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["primary"]["code"] == "WHO01"
    assert body["primary"]["is_unique"] is True
    assert body["primary"]["pattern"]["kind"] == "hybrid"
    assert len(body["alternatives"]) == 5
    assert body["stats"]["unique_count"] >= 6


def test_generate_options(client: TestClient):
    resp = client.post(
        "/api/codes/generate",
        json={
            "entity_name": "World Health Organization",
            "contributor_type": "UN Agency",
            "preferred_length": 6,
            "max_suggestions": 1,
        },
    )

    assert resp.status_code == 200
    assert len(resp.json()["alternatives"]) == 1


def test_generate_blank_name(client: TestClient):
    resp = client.post("/api/codes/generate", json={"entity_name": "  "})
    assert resp.status_code == 400


def test_generate_bad_length(client: TestClient):
    resp = client.post(
        "/api/codes/generate",
        json={"entity_name": "World Health Organization", "preferred_length": 20},
    )
    assert resp.status_code == 400


def test_validate(client: TestClient):
    resp = client.post("/api/codes/validate", json={"code": "WHO"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["is_available"] is False
    assert body["suggestions"] == ["WHO01", "WHO02", "WHO03"]


def test_replace_donors(client: TestClient):
    resp = client.put(
        "/api/donors",
        json=[
            {"name": "Gavi Alliance", "ceb_code": "GAVI", "type": "0"},
            {"name": "Global Fund", "ceb_code": "GAVI"},
        ],
    )
    assert resp.status_code == 200
    assert resp.json() == {"count": 2}

    assert client.post("/api/codes/validate", json={"code": "WHO"}).json()["is_available"] is True
    assert client.get("/api/donors/duplicates").json() == {
        "GAVI": ["Gavi Alliance", "Global Fund"]
    }


def test_replace_donors_rejects_bad_type(client: TestClient):
    resp = client.put("/api/donors", json=[{"name": "X Trust", "ceb_code": "XT", "type": "2"}])
    assert resp.status_code == 422


def test_no_duplicates(client: TestClient):
    assert client.get("/api/donors/duplicates").json() == {}


def test_loads_donor_file(tmp_path: Path):
    csv_file = tmp_path / "donors.csv"
    csv_file.write_text("NAME,CEB CODE\nWorld Health Organization,WHO\n")
    client = TestClient(create_app(donors_path=str(csv_file)))

    resp = client.post("/api/codes/validate", json={"code": "who"})

    assert resp.json()["is_available"] is False


def test_missing_donor_file(tmp_path: Path):
    client = TestClient(create_app(donors_path=str(tmp_path / "missing.csv")))
    resp = client.post("/api/codes/validate", json={"code": "WHO"})
    assert resp.json()["is_available"] is True
