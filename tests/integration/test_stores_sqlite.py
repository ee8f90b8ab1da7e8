"""
Integration tests for the history stores.

Tests cover:
- SqlAlchemyKeyValueStore against in-memory and file SQLite
- HttpRemoteHistoryStore against the FastAPI app and against failing transports
"""

import json
from decimal import Decimal

import httpx
import pytest

from etf_tracker.core.exceptions import RemoteUnavailable
from etf_tracker.domain.models import Snapshot
from etf_tracker.repositories.remote import HttpRemoteHistoryStore
from etf_tracker.repositories.sqlalchemy import SqlAlchemyKeyValueStore
from etf_tracker.repositories.sqlalchemy.database import open_session_at

from tests.conftest import eastern_datetime


SERIES = [
    Snapshot(timestamp=eastern_datetime(2024, 6, 12, 9, 30), value=Decimal("9000.00"), is_static=True),
    Snapshot(timestamp=eastern_datetime(2024, 6, 12, 10, 5), value=Decimal("9123.45")),
]


def _mock_store(handler) -> HttpRemoteHistoryStore:
    client = httpx.Client(base_url="http://backend", transport=httpx.MockTransport(handler))
    return HttpRemoteHistoryStore("http://backend", client=client)


# =============================================================================
# KEY-VALUE STORE TESTS
# =============================================================================


class TestKeyValueStore:
    """Tests for SqlAlchemyKeyValueStore."""

    def test_missing_key(self, kv_store):
        assert kv_store.get("portfolioHistory") is None

    def test_set_then_get(self, kv_store):
        kv_store.set("portfolioHistory", "[]")

        assert kv_store.get("portfolioHistory") == "[]"

    def test_set_overwrites(self, kv_store):
        kv_store.set("portfolioHistory", "[]")
        kv_store.set("portfolioHistory", "[1]")

        assert kv_store.get("portfolioHistory") == "[1]"

    def test_delete(self, kv_store):
        kv_store.set("portfolioHistory", "[]")

        kv_store.delete("portfolioHistory")
        kv_store.delete("portfolioHistory")

        assert kv_store.get("portfolioHistory") is None

    def test_file_store_persists_across_sessions(self, tmp_path):
        """
        GIVEN a local cache file
        WHEN a value is written and the cache is reopened
        THEN the value is still there
        """
        path = tmp_path / "dashboard_cache.db"
        first = open_session_at(path)
        SqlAlchemyKeyValueStore(first).set("portfolioHistory", '[{"x": 1}]')
        first.close()

        second = open_session_at(path)
        try:
            assert SqlAlchemyKeyValueStore(second).get("portfolioHistory") == '[{"x": 1}]'
        finally:
            second.close()


# =============================================================================
# HTTP REMOTE STORE TESTS
# =============================================================================


class TestHttpRemoteHistoryStore:
    """Tests for the remote store client."""

    def test_round_trip_through_backend(self, client):
        store = HttpRemoteHistoryStore("", client=client)

        assert store.load() == []
        assert store.save(SERIES) is True
        assert store.load() == SERIES

    def test_save_posts_versioned_body(self):
        captured = {}

        def handler(request):
            captured.update(json.loads(request.content))
            return httpx.Response(200, json={"success": True})

        assert _mock_store(handler).save(SERIES) is True

        assert captured["version"] == 2
        assert "timestamp" in captured
        assert captured["portfolioHistory"][0]["isStatic"] is True

    def test_server_error_on_load_is_unavailable(self):
        store = _mock_store(lambda request: httpx.Response(500))

        with pytest.raises(RemoteUnavailable):
            store.load()

    def test_connection_error_on_load_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(RemoteUnavailable):
            _mock_store(handler).load()

    def test_malformed_history_is_unavailable(self):
        store = _mock_store(
            lambda request: httpx.Response(200, json={"portfolioHistory": [{"value": "x"}]})
        )

        with pytest.raises(RemoteUnavailable):
            store.load()

    def test_save_failure_returns_false(self):
        assert _mock_store(lambda request: httpx.Response(503)).save(SERIES) is False

    def test_save_connection_error_returns_false(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert _mock_store(handler).save(SERIES) is False
