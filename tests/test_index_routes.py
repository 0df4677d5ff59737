def test_create_index_with_defaults(client, index):
    resp = client.post("/create-index", json={"indexName": "docs"})

    assert resp.status_code == 200
    assert resp.json() == {
        "status": "success",
        "message": "Index 'docs' created successfully",
        "indexName": "docs",
        "dimension": 384,
        "metric": "cosine",
    }
    assert index.calls == [("create_collection", "docs", 384, "cosine")]


def test_create_index_with_explicit_dimension_and_metric(client, index):
    resp = client.post(
        "/create-index",
        json={"indexName": "docs", "dimension": "768", "metric": "dotproduct"},
    )

    assert resp.status_code == 200
    assert resp.json()["dimension"] == 768
    assert index.collections["docs"]["metric"] == "dotproduct"


def test_create_index_without_name_never_reaches_backend(client, index):
    resp = client.post("/create-index", json={"dimension": 384})

    assert resp.status_code == 400
    assert resp.json() == {"status": "error", "message": "Missing required field: indexName"}
    assert index.calls == []


def test_create_existing_index_is_500(client, index):
    client.post("/create-index", json={"indexName": "docs"})
    resp = client.post("/create-index", json={"indexName": "docs"})

    assert resp.status_code == 500
    assert "already exists" in resp.json()["message"]


def test_list_indexes(client, index):
    index.create_collection("a", 384, "cosine")
    index.create_collection("b", 3, "euclidean")

    resp = client.get("/list-indexes")

    assert resp.status_code == 200
    names = [i["name"] for i in resp.json()["indexes"]]
    assert names == ["a", "b"]


def test_index_stats(client, dogs_index):
    client.post("/add-text", json={"indexName": "t", "text": "I love dogs"})

    resp = client.get("/index-stats/t")

    assert resp.status_code == 200
    body = resp.json()
    assert body["indexName"] == "t"
    assert body["stats"]["total_vector_count"] == 1


def test_index_stats_for_missing_index_is_500(client):
    resp = client.get("/index-stats/missing")

    assert resp.status_code == 500
    assert resp.json()["status"] == "error"


def test_delete_index(client, dogs_index):
    resp = client.delete("/delete-index/t")

    assert resp.status_code == 200
    assert resp.json() == {"status": "success", "message": "Index 't' deleted successfully"}
    assert "t" not in dogs_index.collections


def test_delete_missing_index_surfaces_not_found(client):
    resp = client.delete("/delete-index/ghost")

    assert resp.status_code == 500
    body = resp.json()
    assert body["status"] == "error"
    assert "ghost" in body["message"]
    assert "not found" in body["message"]


def test_malformed_json_body_is_400(client, index):
    resp = client.post(
        "/create-index",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json()["status"] == "error"
    assert index.calls == []
