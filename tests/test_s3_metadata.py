import asyncio
import logging

import pytest

from items.memory import InMemoryItemTaskManager
from items.models import Member
from providers.storage import ObjectMetadata
from s3file.errors import NotS3FileItem
from s3file.metadata import MetadataResolver
from fakes import CountingItemTaskManager, FakeObjectStore


def _upload(client) -> dict:
    resp = client.post("/s3-upload", json={"filename": "report.pdf"})
    assert resp.status_code == 200, resp.text
    return resp.json()["item"]


def test_metadata_is_resolved_once_then_served_from_record(client, fake_store, items):
    item = _upload(client)
    key = item["extra"]["s3File"]["key"]
    fake_store.objects[key] = ObjectMetadata(size=1024, content_type="application/pdf")
    fake_store.calls.clear()

    first = client.get(f"/{item['id']}/s3-metadata")
    assert first.status_code == 200, first.text
    assert first.json() == {
        "displayName": "report.pdf",
        "key": key,
        "size": 1024,
        "contentType": "application/pdf",
    }
    assert len(fake_store.ops("head_object")) == 1
    assert items.update_calls == 1

    fake_store.calls.clear()
    second = client.get(f"/{item['id']}/s3-metadata")
    assert second.status_code == 200
    assert second.json() == first.json()
    assert fake_store.calls == []
    assert items.update_calls == 1


def test_metadata_persisted_on_item(client, fake_store):
    item = _upload(client)
    key = item["extra"]["s3File"]["key"]
    fake_store.objects[key] = ObjectMetadata(size=0, content_type="text/plain")

    client.get(f"/{item['id']}/s3-metadata")

    stored = client.get(f"/items/{item['id']}").json()
    assert stored["extra"]["s3File"] == {
        "displayName": "report.pdf",
        "key": key,
        "size": 0,
        "contentType": "text/plain",
    }


def test_metadata_of_non_file_item_is_rejected_without_store_calls(client, fake_store, items, member):
    folder = asyncio.run(
        items.create_item(
            member,
            {"name": "lookalike", "type": "document", "extra": {"s3File": {"displayName": "a", "key": "a/b/c-1"}}},
        )
    )

    resp = client.get(f"/{folder.id}/s3-metadata")
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "GS3FIERR001"
    assert body["origin"] == "s3-file-item"
    assert fake_store.calls == []
    assert items.update_calls == 0


def test_metadata_head_failure_propagates_without_update(client, fake_store, items, caplog):
    item = _upload(client)
    key = item["extra"]["s3File"]["key"]
    fake_store.calls.clear()

    with caplog.at_level(logging.ERROR, logger="s3file.metadata"):
        resp = client.get(f"/{item['id']}/s3-metadata")

    assert resp.status_code == 502
    assert resp.json()["data"] == {"operation": "head_object", "key": key}
    assert items.update_calls == 0
    assert any(key in r.getMessage() for r in caplog.records)

    stored = client.get(f"/items/{item['id']}").json()
    assert "size" not in stored["extra"]["s3File"]


def test_metadata_unknown_item_is_404(client):
    resp = client.get("/00000000-0000-0000-0000-000000000000/s3-metadata")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_resolver_raises_not_s3_file_item():
    store = FakeObjectStore()
    items = InMemoryItemTaskManager()
    actor = Member(id="m")
    folder = await items.create_item(actor, {"name": "f", "type": "folder"})

    resolver = MetadataResolver(store, items)
    with pytest.raises(NotS3FileItem):
        await resolver.resolve(actor, folder.id)
    assert store.calls == []


@pytest.mark.asyncio
async def test_resolver_second_read_is_served_from_record():
    store = FakeObjectStore()
    items = CountingItemTaskManager()
    actor = Member(id="m")
    item = await items.create_item(
        actor,
        {"name": "a", "type": "s3-file", "extra": {"s3File": {"displayName": "a", "key": "k/k/k-1"}}},
    )
    store.objects["k/k/k-1"] = ObjectMetadata(size=5, content_type="text/plain")

    resolver = MetadataResolver(store, items)
    first = await resolver.resolve(actor, item.id)
    again = await resolver.resolve(actor, item.id)

    assert first == again
    assert len(store.ops("head_object")) == 1
    assert items.update_calls == 1
