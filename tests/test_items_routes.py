import logging

from fastapi.testclient import TestClient

from auth.jwt import get_current_member
from main import create_app


def _upload(client) -> dict:
    resp = client.post("/s3-upload", json={"filename": "report.pdf"})
    assert resp.status_code == 200, resp.text
    return resp.json()["item"]


def test_copy_route_returns_item_with_new_key(client, fake_store):
    item = _upload(client)
    old_key = item["extra"]["s3File"]["key"]

    resp = client.post(f"/items/{item['id']}/copy")
    assert resp.status_code == 200, resp.text

    copy = resp.json()
    assert copy["id"] != item["id"]
    assert copy["extra"]["s3File"]["key"] != old_key
    assert fake_store.ops("copy_object")[0]["key"] == old_key


def test_copy_route_fails_when_object_copy_fails(client, fake_store, items):
    item = _upload(client)
    fake_store.fail["copy_object"] = True

    resp = client.post(f"/items/{item['id']}/copy")
    assert resp.status_code == 502
    assert resp.json()["data"]["operation"] == "copy_object"
    assert list(items._items) == [item["id"]]


def test_delete_route_succeeds_even_if_object_delete_fails(providers, member, fake_store, caplog):
    app = create_app(providers)
    app.dependency_overrides[get_current_member] = lambda: member
    fake_store.fail["delete_object"] = True

    with caplog.at_level(logging.ERROR, logger="s3file.hooks"):
        with TestClient(app) as client:
            item = _upload(client)
            key = item["extra"]["s3File"]["key"]

            resp = client.delete(f"/items/{item['id']}")
            assert resp.status_code == 200
            assert client.get(f"/items/{item['id']}").status_code == 404
        # leaving the client drains detached deletes

    assert [c["key"] for c in fake_store.ops("delete_object")] == [key]
    assert any(key in r.getMessage() for r in caplog.records if r.name == "s3file.hooks")


def test_routes_require_a_member(providers):
    app = create_app(providers)
    with TestClient(app) as client:
        resp = client.post("/s3-upload", json={"filename": "a.txt"})
    assert resp.status_code == 401


def test_health_is_public(providers):
    app = create_app(providers)
    with TestClient(app) as client:
        resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True
