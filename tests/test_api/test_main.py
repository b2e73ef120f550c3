"""Tests for the knowtree HTTP API."""
import pytest
from fastapi.testclient import TestClient

from knowtree.api.dependencies import get_settings
from knowtree.api.main import app
from knowtree.config.settings import Settings


@pytest.fixture
def client():
    """Test client with default settings."""
    app.dependency_overrides[get_settings] = lambda: Settings()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def forest():
    """A forest in JSON form."""
    return [
        {
            "id": "root",
            "title": "Physics",
            "kind": "syllabus",
            "children": [
                {"id": "mech", "title": "Mechanics", "kind": "folder", "parent_id": "root"},
                {
                    "id": "optics",
                    "title": "Optics",
                    "kind": "file",
                    "parent_id": "root",
                    "tags": ["light"],
                },
            ],
        }
    ]


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_import_rows(client):
    """Test building an import tree."""
    response = client.post(
        "/import",
        json={
            "rows": [
                {"title": "A", "parent": ""},
                {"title": "B", "parent": "1"},
                {"title": "C", "parent": "99"},
            ],
            "mapping": {"title": "title", "parent": "parent"},
            "root_title": "Course",
        },
    )
    assert response.status_code == 200
    data = response.json()

    assert data["node_count"] == 4
    assert data["duplicate_of"] is None
    root = data["root"]
    assert root["kind"] == "container"
    assert root["metadata"]["generated_root"] is True
    assert [c["title"] for c in root["children"]] == ["A", "C"]
    assert root["children"][0]["children"][0]["title"] == "B"


def test_import_reports_duplicate(client, forest):
    """Test the duplicate title pre-check."""
    response = client.post(
        "/import",
        json={
            "rows": [{"title": "A"}],
            "mapping": {"title": "title"},
            "root_title": "Physics",
            "existing_roots": forest,
        },
    )
    assert response.status_code == 200
    assert response.json()["duplicate_of"] == "root"
    assert response.json()["node_count"] == 2


def test_import_requires_title_mapping(client):
    """Test validation of the column mapping."""
    response = client.post(
        "/import",
        json={"rows": [], "mapping": {"parent": "parent"}, "root_title": "Course"},
    )
    assert response.status_code == 422


def test_layout(client, forest):
    """Test the layout endpoint."""
    response = client.post("/layout", json={"forest": forest, "radius_step": 100})
    assert response.status_code == 200
    data = response.json()

    assert set(data["positions"]) == {"root", "mech", "optics"}
    assert data["positions"]["root"] == {"x": 0.0, "y": 0.0}
    assert data["positions"]["mech"] == {"x": 0.0, "y": 100.0}
    assert data["edges"] == [
        {"from": "root", "to": "mech"},
        {"from": "root", "to": "optics"},
    ]


def test_layout_rejects_invalid_radius(client, forest):
    """Test that a negative radius step is a client error."""
    response = client.post("/layout", json={"forest": forest, "radius_step": -5})
    assert response.status_code == 400
    assert response.json()["error_code"] == "ConfigurationError"


def test_search(client, forest):
    """Test the search endpoint."""
    response = client.post("/search", json={"forest": forest, "query": "Optcs"})
    assert response.status_code == 200
    data = response.json()

    assert data["total"] >= 1
    assert data["results"][0]["id"] == "optics"
    assert data["results"][0]["children"] == []


def test_search_empty_query(client, forest):
    """Test that an empty query returns no results."""
    response = client.post("/search", json={"forest": forest, "query": ""})
    assert response.status_code == 200
    assert response.json() == {"results": [], "total": 0}
