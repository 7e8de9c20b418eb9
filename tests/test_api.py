from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from skills_server.api import app, current_catalog
from skills_server.catalog import Catalog


@pytest.fixture
def client(sample_catalog: Catalog):
    app.dependency_overrides[current_catalog] = lambda: sample_catalog
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy", "skills": 4}


def test_list_and_get(client: TestClient) -> None:
    r = client.get("/skills", params={"category": "test"})
    assert r.status_code == 200
    assert [s["id"] for s in r.json()["skills"]] == ["c"]

    assert client.get("/skills/b").json()["name"] == "API Security"
    missing = client.get("/skills/nope")
    assert missing.status_code == 404
    assert "not found" in missing.json()["detail"]


def test_search_ranks_and_builds_workflow(client: TestClient) -> None:
    body = client.get("/search", params={"q": "security api"}).json()
    assert [(h["id"], h["score"]) for h in body["results"]] == [("b", 13)]
    assert body["workflow"][0]["action_verb"] == "Audit & Secure"
    assert body["workflow"][0]["rationale"] == 'Relevant for "security api"'


def test_search_short_query_is_empty(client: TestClient) -> None:
    body = client.get("/search", params={"q": "ab"}).json()
    assert body["results"] == []
    assert body["workflow"] == []


def test_categories_use_display_grouping(client: TestClient) -> None:
    body = client.get("/categories").json()
    names = [c["name"] for c in body["categories"]]
    assert set(names) == {"development", "security", "testing", "uncategorized"}
    assert body["totalSkills"] == 4


def test_content_404(client: TestClient) -> None:
    assert client.get("/skills/nope/content").status_code == 404


def test_workflow_suggest(client: TestClient) -> None:
    r = client.post("/workflow/suggest", json={"goal": "Build a secure REST API"})
    assert r.status_code == 200
    skills = [s["skill"] for s in r.json()["workflow"]]
    assert skills[-1] == "testing-patterns"
    assert "api-security-best-practices" in skills
