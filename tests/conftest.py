"""Pytest configuration and fixtures for sparquil.

No live Redis is needed: the env cache is exercised against FakeKVStore,
an in-memory KVStoreProtocol, and RedisKVStore against a mocked
redis.asyncio client (see make_redis_client / make_pubsub).
"""

from __future__ import annotations

import asyncio
import fnmatch
from collections.abc import AsyncIterator, Callable, Iterable, Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from sparquil.application.env_cache import EnvCache
from sparquil.core.config import Settings, get_settings


class FakeSubscription:
    """SubscriptionProtocol double; records close()."""

    def __init__(self) -> None:
        self.closed = False

    @property
    def active(self) -> bool:
        return not self.closed

    async def close(self) -> None:
        self.closed = True


class FakeKVStore:
    """In-memory KVStoreProtocol.

    set()/delete() change data and notify active subscribers the way a
    keyspace notification followed by a read-back would. on_scan runs after
    the scan result is taken, to simulate changes racing the bulk load.
    """

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.subscribers: list[tuple[str, Callable[[str, str | None], None], FakeSubscription]] = []
        self.on_scan: Callable[[], None] | None = None

    async def scan_prefix(self, pattern: str) -> dict[str, str]:
        result = {k: v for k, v in self.data.items() if fnmatch.fnmatchcase(k, pattern)}
        if self.on_scan is not None:
            self.on_scan()
        return result

    async def subscribe(
        self, pattern: str, callback: Callable[[str, str | None], None]
    ) -> FakeSubscription:
        subscription = FakeSubscription()
        self.subscribers.append((pattern, callback, subscription))
        return subscription

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self._notify(key)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
        self._notify(key)

    def _notify(self, key: str) -> None:
        for pattern, callback, subscription in self.subscribers:
            if subscription.active and fnmatch.fnmatchcase(key, pattern):
                callback(key, self.data.get(key))


async def aiter_of(items: Iterable[Any]) -> AsyncIterator[Any]:
    """Async iterator over items (stands in for scan_iter / PubSub.listen)."""
    for item in items:
        yield item


async def never_ending() -> AsyncIterator[Any]:
    """Async iterator that blocks until cancelled."""
    await asyncio.Event().wait()
    yield None


def make_pubsub(messages: Iterable[Any] | None = None) -> MagicMock:
    """Mock PubSub; listen() yields messages then ends (or blocks if None)."""
    pubsub = MagicMock()
    pubsub.psubscribe = AsyncMock()
    pubsub.punsubscribe = AsyncMock()
    pubsub.aclose = AsyncMock()
    if messages is None:
        pubsub.listen = MagicMock(side_effect=lambda: never_ending())
    else:
        items = list(messages)
        pubsub.listen = MagicMock(side_effect=lambda: aiter_of(items))
    return pubsub


def make_redis_client(
    data: dict[str, str] | None = None,
    pubsub: MagicMock | None = None,
) -> MagicMock:
    """Mock redis.asyncio.Redis backed by a plain dict."""
    data = data if data is not None else {}
    client = MagicMock()
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    client.config_set = AsyncMock(return_value=True)
    client.get = AsyncMock(side_effect=lambda key: data.get(key))
    client.mget = AsyncMock(side_effect=lambda keys: [data.get(k) for k in keys])
    client.scan_iter = MagicMock(
        side_effect=lambda match="*", count=None: aiter_of(
            [k for k in list(data) if fnmatch.fnmatchcase(k, match)]
        )
    )
    client.pubsub = MagicMock(return_value=pubsub or make_pubsub())
    return client


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Default settings without reading a .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def fake_store() -> FakeKVStore:
    return FakeKVStore({"env/color": "12", "junk/x": "1"})


@pytest.fixture
def env_cache() -> EnvCache:
    return EnvCache()
