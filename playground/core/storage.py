"""Durable key-value storage for progress records.

The orchestrator only needs two operations, so any medium works as long as
it satisfies :class:`KeyValueStore`:

    store = build_store(get_settings())
    store.set("completed-modules", '["reentrancy"]')
    store.get("completed-modules")

Values are strings; callers are responsible for JSON encoding.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import redis

from playground.core.config import Settings
from playground.core.errors import StorageError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Capability injected into the orchestrator for persistence."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store. Durable only for the lifetime of the object."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """All keys kept in a single JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read store at {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Store at {self._path} is not a JSON object")
        return data

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so a crash never leaves a truncated document
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise StorageError(f"Cannot write store at {self._path}: {exc}") from exc


class RedisKeyValueStore:
    """Redis-backed store, for hosts that run many sessions."""

    def __init__(
        self,
        url: str | None = None,
        prefix: str = "playground",
        client: Any | None = None,
    ) -> None:
        self._prefix = prefix
        if client is not None:
            self._client = client
        else:
            self._client = redis.Redis.from_url(
                url or "redis://localhost:6379/0",
                decode_responses=True,
                socket_connect_timeout=2,
            )

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str) -> str | None:
        try:
            raw = self._client.get(self._key(key))
        except redis.RedisError as exc:
            raise StorageError(f"Redis GET failed for {key}: {exc}") from exc
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return raw

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except redis.RedisError as exc:
            raise StorageError(f"Redis SET failed for {key}: {exc}") from exc


def build_store(settings: Settings) -> KeyValueStore:
    """Build the store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "file":
        logger.debug("Using JSON file progress store at %s", settings.storage_path)
        return JsonFileKeyValueStore(settings.storage_path)
    if settings.storage_backend == "redis":
        logger.debug("Using Redis progress store at %s", settings.redis_url)
        return RedisKeyValueStore(settings.redis_url)
    return InMemoryKeyValueStore()
