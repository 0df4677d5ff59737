from fastapi.testclient import TestClient

from fakes import FakeEmbedder, UnreachableIndexClient
from text_vector_service.main import create_app


def test_root_lists_endpoints(client):
    resp = client.get("/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["version"]
    assert "POST /add-text" in body["endpoints"]
    assert "DELETE /delete-index/{indexName}" in body["endpoints"]


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert body["message"]
    assert body["timestamp"].endswith("Z")


def test_test_pinecone_reports_index_count(client, index):
    index.create_collection("a", 384, "cosine")

    resp = client.get("/test-pinecone")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert body["indexCount"] == 1
    assert body["indexes"][0]["name"] == "a"


def test_test_pinecone_when_backend_is_unreachable(settings):
    app = create_app(settings, embedder=FakeEmbedder(), index_client=UnreachableIndexClient())

    with TestClient(app) as c:
        resp = c.get("/test-pinecone")

    assert resp.status_code == 500
    body = resp.json()
    assert body["status"] == "error"
    assert body["message"] == "Failed to connect to fake"
    assert "Unauthorized" in body["error"]


def test_list_indexes_when_backend_is_unreachable(settings):
    app = create_app(settings, embedder=FakeEmbedder(), index_client=UnreachableIndexClient())

    with TestClient(app) as c:
        resp = c.get("/list-indexes")

    assert resp.status_code == 500
    assert resp.json() == {"status": "error", "message": "Unauthorized: invalid API key"}


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/does-not-exist")

    assert resp.status_code == 404
    assert resp.json()["status"] == "error"
