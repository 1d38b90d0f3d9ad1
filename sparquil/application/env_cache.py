"""Environment cache: local read replica of env keys from a key/value store.

The cache is seeded by a bulk scan and kept current by change
notifications. Writers are the bulk load and the notification callback;
readers (the sketch loop) call get() on their own schedule and never wait
on the store. Every cached key satisfies is_valid_env_key.
"""

from __future__ import annotations

import logging
import threading

from sparquil.core.constants import DEFAULT_ENV_PATTERN
from sparquil.domain.env_keys import is_valid_env_key
from sparquil.infrastructure.kv_store.kv_protocol import (
    KVStoreProtocol,
    SubscriptionProtocol,
)

logger = logging.getLogger(__name__)


class EnvCache:
    """Pattern-scoped, push-synchronized read cache over a KVStoreProtocol.

    Lifecycle: created empty, populated by start(), updated by on_change()
    until stop() closes the subscription and discards the entries.

    Start subscribes before scanning so no change between the two is lost.
    While the scan is being ingested, a key that a notification has already
    written keeps the notified value: that value was read after the change,
    and any later change brings another notification.
    """

    def __init__(self, pattern: str = DEFAULT_ENV_PATTERN) -> None:
        """Initialize an empty cache.

        Args:
            pattern: Glob pattern of store keys to mirror (e.g. env*).
        """
        self.pattern = pattern
        self.kv_store: KVStoreProtocol | None = None
        self._cache: dict[str, str] = {}
        self._write_lock = threading.Lock()
        self._subscription: SubscriptionProtocol | None = None
        self._loading = False
        self._notified_during_load: set[str] = set()

    @property
    def started(self) -> bool:
        return self.kv_store is not None

    async def start(self, kv_store: KVStoreProtocol) -> None:
        """Subscribe to changes, then bulk-load all matching keys.

        Returns once the bulk load is complete.

        Raises:
            StoreUnavailableException: If the store cannot be reached.
        """
        if self.started:
            logger.warning("Env cache for %s already started", self.pattern)
            return
        self._loading = True
        self._notified_during_load.clear()
        try:
            self._subscription = await kv_store.subscribe(self.pattern, self.on_change)
            self.kv_store = kv_store
            entries = await kv_store.scan_prefix(self.pattern)
            self._ingest_bulk(entries)
        except BaseException:
            await self._close_subscription()
            self.kv_store = None
            raise
        finally:
            self._loading = False
            self._notified_during_load.clear()
        logger.info("Env cache started: %s keys loaded for %s", len(self._cache), self.pattern)

    def _ingest_bulk(self, entries: dict[str, str]) -> None:
        for key, value in entries.items():
            if key in self._notified_during_load:
                logger.debug("Keeping notified value for %s over scanned value", key)
                continue
            self._apply(key, value)

    def on_change(self, key: str, value: str | None) -> None:
        """Apply a change notification: upsert if key is valid, evict if value is None.

        Last write wins. Invalid keys are logged and dropped.
        """
        if self._loading:
            self._notified_during_load.add(key)
        self._apply(key, value)

    def _apply(self, key: str, value: str | None) -> None:
        if not is_valid_env_key(key):
            logger.warning("Ignoring invalid env key: %r", key)
            return
        if value is None:
            with self._write_lock:
                removed = self._cache.pop(key, None)
            if removed is not None:
                logger.info("Removed env key: %s", key)
            return
        with self._write_lock:
            self._cache[key] = value
        logger.info("Updating env: %s -> %s", key, value)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the cached value for key, or default. Never touches the store."""
        return self._cache.get(key, default)

    def snapshot(self) -> dict[str, str]:
        """Return a shallow copy of all cached entries."""
        with self._write_lock:
            return dict(self._cache)

    async def _close_subscription(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.close()

    async def stop(self) -> None:
        """Close the subscription, release the store and discard cached entries."""
        await self._close_subscription()
        self.kv_store = None
        with self._write_lock:
            self._cache.clear()
        logger.info("Env cache stopped for %s", self.pattern)
