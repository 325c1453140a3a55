"""Tests for the FastAPI surface with an in-memory schema source."""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeSchemaSource, rel_row
from schema_introspector.api import create_app


@pytest.fixture
def client(disjoint_source):
    app = create_app(source_factory=lambda: disjoint_source)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_get_introspect_defaults(client):
    response = client.get("/introspect")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    graph_schema = response.json()["graphSchemaRepresentation"]["graphSchema"]
    assert [rel["$id"] for rel in graph_schema["relationshipObjectTypes"]] == ["r:A_TYPE"]
    assert "\n" not in response.text


def test_get_introspect_with_query_options(client):
    response = client.get("/introspect", params={"sampleOnly": "false", "prettyPrint": "true"})
    assert response.status_code == 200
    assert "\n" in response.text
    graph_schema = json.loads(response.text)["graphSchemaRepresentation"]["graphSchema"]
    assert [rel["$id"] for rel in graph_schema["relationshipObjectTypes"]] == ["r:A_TYPE", "r:A_TYPE_1"]


def test_post_introspect(client):
    response = client.post("/introspect", json={"useConstantIds": False})
    assert response.status_code == 200
    labels = response.json()["graphSchemaRepresentation"]["graphSchema"]["nodeLabels"]
    assert not any(label["$id"].startswith("nl:") for label in labels)


def test_post_introspect_rejects_non_boolean_options(client):
    response = client.post("/introspect", json={"sampleOnly": "yes"})
    assert response.status_code == 422


def test_inconsistent_source_is_a_bad_gateway():
    source = FakeSchemaSource(labels=["A"], relationship_types=["KNOWS"], relationship_rows=[rel_row("LIKES", ["A"], ["A"])])
    app = create_app(source_factory=lambda: source)
    with TestClient(app) as test_client:
        response = test_client.get("/introspect")
    assert response.status_code == 502
    assert "LIKES" in response.json()["detail"]
