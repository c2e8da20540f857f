"""
BrettAppsCode Backend - Datasheet / Databank Tests
====================================================
"""

import threading

import pytest

from app.exceptions import NotFoundError
from app.services.kv_store import KeyValueStore


class TestKeyValueStore:

    def test_get_missing_raises_with_store_message(self):
        store = KeyValueStore("datasheet", missing_message="Data sheet not found")
        with pytest.raises(NotFoundError, match="Data sheet not found"):
            store.get("nope")

    def test_none_is_a_stored_value(self):
        store = KeyValueStore("databank")
        store.set("k", None)
        assert store.get("k") is None

    def test_snapshot_is_a_copy(self):
        store = KeyValueStore("databank")
        store.set("a", 1)
        snap = store.snapshot()
        snap["b"] = 2
        assert store.snapshot() == {"a": 1}

    def test_concurrent_sets(self):
        store = KeyValueStore("databank")

        def writer(offset):
            for i in range(200):
                store.set(f"{offset}-{i}", i)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store) == 800


class TestDatasheetEndpoints:

    @pytest.mark.asyncio
    async def test_create_get_update(self, test_client):
        response = await test_client.post("/api/datasheet", json={"id": "s1", "data": {"rows": [1, 2]}})
        assert response.json() == {"success": True, "id": "s1"}

        response = await test_client.get("/api/datasheet/s1")
        assert response.json() == {"success": True, "data": {"rows": [1, 2]}}

        response = await test_client.put("/api/datasheet/s1", json={"data": [3]})
        assert response.json() == {"success": True, "id": "s1"}
        assert (await test_client.get("/api/datasheet/s1")).json()["data"] == [3]

    @pytest.mark.asyncio
    async def test_missing_sheet(self, test_client):
        response = await test_client.get("/api/datasheet/unknown")
        assert response.status_code == 404
        assert response.json()["error"] == "Data sheet not found"

    @pytest.mark.asyncio
    async def test_create_without_id(self, test_client):
        response = await test_client.post("/api/datasheet", json={"data": 1})
        assert response.status_code == 400
        assert response.json()["error"] == "Data sheet id required"


class TestDatabankEndpoints:

    @pytest.mark.asyncio
    async def test_set_get_dump(self, test_client):
        await test_client.post("/api/databank", json={"key": "theme", "value": "dark"})
        await test_client.post("/api/databank", json={"key": "cleared", "value": None})

        response = await test_client.get("/api/databank/theme")
        assert response.json() == {"success": True, "value": "dark"}

        response = await test_client.get("/api/databank/cleared")
        assert response.status_code == 200
        assert response.json()["value"] is None

        response = await test_client.get("/api/databank")
        assert response.json() == {"success": True, "data": {"theme": "dark", "cleared": None}}

    @pytest.mark.asyncio
    async def test_missing_key(self, test_client):
        response = await test_client.get("/api/databank/nothing")
        assert response.status_code == 404
        assert response.json()["error"] == "Key not found"

    @pytest.mark.asyncio
    async def test_set_without_key(self, test_client):
        response = await test_client.post("/api/databank", json={"value": 5})
        assert response.status_code == 400
