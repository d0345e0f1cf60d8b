"""Tests for playground.core.storage: key-value capability backends.

Covers:
- In-memory get/set
- JSON file store persistence, atomic write, corrupt documents
- Redis store key prefixing and error wrapping (mocked client)
- build_store backend selection
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import redis

from playground.core.config import Settings
from playground.core.errors import StorageError
from playground.core.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    build_store,
)


class TestInMemoryStore:

    def test_get_missing(self):
        assert InMemoryKeyValueStore().get("nope") is None

    def test_set_then_get(self):
        store = InMemoryKeyValueStore()
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_initial_data_is_copied(self):
        initial = {"k": "v"}
        store = InMemoryKeyValueStore(initial)
        store.set("k", "changed")
        assert initial["k"] == "v"

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryKeyValueStore(), KeyValueStore)


class TestJsonFileStore:

    def test_missing_file_reads_none(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "progress.json")
        assert store.get("k") is None

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "progress.json"
        JsonFileKeyValueStore(path).set("k", "v")
        assert JsonFileKeyValueStore(path).get("k") == "v"

    def test_keeps_other_keys(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "p.json")
        store.set("a", "1")
        store.set("b", "2")
        assert store.get("a") == "1"
        assert store.get("b") == "2"

    def test_no_tmp_file_left_behind(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "p.json")
        store.set("a", "1")
        assert [p.name for p in tmp_path.iterdir()] == ["p.json"]

    def test_corrupt_document(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileKeyValueStore(path).get("k")

    def test_non_object_document(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileKeyValueStore(path).get("k")


class TestRedisStore:

    def test_prefixes_keys(self):
        client = MagicMock()
        client.get.return_value = "v"
        store = RedisKeyValueStore(client=client, prefix="pg")
        store.set("k", "v")
        client.set.assert_called_once_with("pg:k", "v")
        assert store.get("k") == "v"
        client.get.assert_called_once_with("pg:k")

    def test_decodes_bytes(self):
        client = MagicMock()
        client.get.return_value = b"v"
        assert RedisKeyValueStore(client=client).get("k") == "v"

    def test_missing_key(self):
        client = MagicMock()
        client.get.return_value = None
        assert RedisKeyValueStore(client=client).get("k") is None

    def test_get_error_is_wrapped(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")
        with pytest.raises(StorageError, match="GET failed"):
            RedisKeyValueStore(client=client).get("k")

    def test_set_error_is_wrapped(self):
        client = MagicMock()
        client.set.side_effect = redis.ConnectionError("down")
        with pytest.raises(StorageError, match="SET failed"):
            RedisKeyValueStore(client=client).set("k", "v")


class TestBuildStore:

    def test_memory(self):
        assert isinstance(build_store(Settings(storage_backend="memory")), InMemoryKeyValueStore)

    def test_file(self, tmp_path):
        settings = Settings(storage_backend="file", storage_path=str(tmp_path / "p.json"))
        store = build_store(settings)
        assert isinstance(store, JsonFileKeyValueStore)
        assert store.path == tmp_path / "p.json"

    def test_redis(self):
        # from_url does not connect until the first command
        store = build_store(Settings(storage_backend="redis", redis_url="redis://localhost:6399/0"))
        assert isinstance(store, RedisKeyValueStore)
