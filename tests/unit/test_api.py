from __future__ import annotations

from fastapi.testclient import TestClient

from search_facets.api import app

client = TestClient(app)


def test_health():
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_extract_endpoint():
    res = client.post(
        "/aggregations/extract",
        content=b'{"tags":{"filtered":{"buckets":[{"key":"bass","doc_count":1}]}},"empty":{"buckets":[]}}',
        headers={"content-type": "application/json"},
    )

    assert res.status_code == 200
    assert res.json() == {"count": 1, "buckets": [{"name": "filtered", "key_count": {"bass": 1}}]}


def test_extract_endpoint_rejects_non_object():
    res = client.post("/aggregations/extract", content=b"[1,2,3]")

    assert res.status_code == 400
    assert "detail" in res.json()
