"""
Unit tests for the board service stores.

Tests:
- Memory and SQL stores share the same record behaviour
- SQL boards survive reopening the database
- Fallback to memory when the database is unavailable
- Database failures become HTTP 500 responses
"""

import logging
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from server.app import create_app
from server.store import (
    BoardStoreError, MemoryBoardStore, SqlBoardStore, open_store,
)


ELEMENTS = [{"id": "a", "type": "queue", "x": 1, "y": 2, "w": 130, "h": 72, "label": ""}]
CONNECTORS = [{"id": "c", "from": "a", "to": "b", "label": "AMQP"}]


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    if request.param == "memory":
        yield MemoryBoardStore()
        return
    sql_store = SqlBoardStore("sqlite://")
    yield sql_store
    sql_store.close()


class TestStoreRecords:
    """Tests run against both stores."""

    def test_unknown_session(self, store):
        assert store.get("nobody") is None
        assert len(store) == 0

    def test_put_then_get(self, store):
        record = store.put("s", ELEMENTS, CONNECTORS)
        assert record["elements"] == ELEMENTS
        assert record["connectors"] == CONNECTORS
        assert store.get("s") == record
        assert len(store) == 1

    def test_updated_at_is_utc_iso(self, store):
        record = store.put("s", [], [])
        stamp = datetime.fromisoformat(record["updatedAt"])
        assert stamp.utcoffset().total_seconds() == 0

    def test_put_overwrites(self, store):
        store.put("s", ELEMENTS, CONNECTORS)
        store.put("s", [], [])
        assert store.get("s")["elements"] == []
        assert len(store) == 1

    def test_delete(self, store):
        store.put("s", ELEMENTS, CONNECTORS)
        assert store.delete("s")
        assert not store.delete("s")
        assert store.get("s") is None


class TestSqlBoardStore:
    """Tests for the database-backed store."""

    def test_durable_flag(self):
        assert SqlBoardStore.durable
        assert not MemoryBoardStore.durable

    def test_survives_reopen(self, temp_dir):
        url = f"sqlite:///{temp_dir / 'boards.db'}"
        first = SqlBoardStore(url)
        first.put("s", ELEMENTS, CONNECTORS)
        first.close()

        second = SqlBoardStore(url)
        try:
            assert second.get("s")["elements"] == ELEMENTS
        finally:
            second.close()

    def test_service_restart_keeps_board(self, temp_dir):
        url = f"sqlite:///{temp_dir / 'boards.db'}"
        store = SqlBoardStore(url)
        TestClient(create_app(store)).post("/api/board/s", json={
            "elements": ELEMENTS, "connectors": CONNECTORS,
        })
        store.close()

        restarted = SqlBoardStore(url)
        try:
            body = TestClient(create_app(restarted)).get("/api/board/s").json()
            assert body["connectors"] == CONNECTORS
        finally:
            restarted.close()


class TestOpenStore:
    """Tests for store selection."""

    def test_database_url(self, temp_dir):
        store = open_store(f"sqlite:///{temp_dir / 'boards.db'}")
        try:
            assert isinstance(store, SqlBoardStore)
        finally:
            store.close()

    def test_no_url_selects_memory(self):
        assert isinstance(open_store(None), MemoryBoardStore)
        assert isinstance(open_store(""), MemoryBoardStore)

    def test_unreachable_database_falls_back(self, temp_dir, caplog):
        url = f"sqlite:///{temp_dir / 'missing' / 'dir' / 'boards.db'}"
        with caplog.at_level(logging.WARNING):
            store = open_store(url)
        assert isinstance(store, MemoryBoardStore)
        assert "in-memory store" in caplog.text

    def test_invalid_url_falls_back(self):
        assert isinstance(open_store("not a database url"), MemoryBoardStore)

    def test_health_reports_store(self, temp_dir):
        store = open_store(f"sqlite:///{temp_dir / 'boards.db'}")
        try:
            assert TestClient(create_app(store)).get("/api/health").json()["database"]
        finally:
            store.close()
        fallback = open_store(f"sqlite:///{temp_dir / 'missing' / 'boards.db'}")
        assert TestClient(create_app(fallback)).get("/api/health").json()["database"] is False


class TestStoreFailures:
    """Tests for database errors during requests."""

    @pytest.fixture
    def broken(self):
        store = MagicMock()
        store.durable = True
        store.get.side_effect = BoardStoreError("read failed")
        store.put.side_effect = BoardStoreError("write failed")
        store.delete.side_effect = BoardStoreError("delete failed")
        return TestClient(create_app(store))

    def test_get_returns_500(self, broken):
        res = broken.get("/api/board/s")
        assert res.status_code == 500
        assert res.json()["detail"] == "read failed"

    def test_post_returns_500(self, broken):
        res = broken.post("/api/board/s", json={"elements": [], "connectors": []})
        assert res.status_code == 500

    def test_delete_returns_500(self, broken):
        assert broken.delete("/api/board/s").status_code == 500
