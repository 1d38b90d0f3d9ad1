"""Redis key/value store client for the environment mirror.

Provides the bulk pattern scan and keyspace-notification subscription the
environment cache is built on. Changes are observed through Redis
keyspace notifications (``__keyspace@<db>__:<key>`` channels), which only
carry the operation name, so the current value is re-read for every
notification before the callback runs.
"""

from __future__ import annotations

import asyncio
import logging

import redis.asyncio as redis
from redis.asyncio.client import PubSub

from sparquil.core.config import Settings, get_settings
from sparquil.core.constants import keyspace_channel
from sparquil.domain.exceptions import StoreUnavailableException
from sparquil.infrastructure.kv_store.kv_protocol import ChangeCallback
from sparquil.infrastructure.kv_store.notifications import (
    Malformed,
    Message,
    Notification,
    Subscribed,
    parse_notification,
)

logger = logging.getLogger(__name__)


class RedisSubscription:
    """Handle for one PSUBSCRIBE on a keyspace channel pattern.

    Owns its PubSub connection and the listener task; close() tears both
    down and is safe to call more than once.
    """

    def __init__(self, channel: str, pubsub: PubSub) -> None:
        self.channel = channel
        self.pubsub = pubsub
        self.task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active(self) -> bool:
        """Return True while the listener task is running."""
        return not self._closed and self.task is not None and not self.task.done()

    async def close(self) -> None:
        """Cancel the listener, unsubscribe and close the pub/sub connection."""
        if self._closed:
            return
        self._closed = True
        if self.task is not None and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
        try:
            await self.pubsub.punsubscribe(self.channel)
        except redis.RedisError as e:
            logger.warning("Failed to unsubscribe from %s: %s", self.channel, e)
        finally:
            await self.pubsub.aclose()
        logger.info("Unsubscribed from %s", self.channel)


class RedisKVStore:
    """Async Redis client exposing scan_prefix and subscribe (KVStoreProtocol).

    Call connect() at startup and disconnect() at shutdown. Unlike a
    best-effort cache, connection failures are fatal here and raise
    StoreUnavailableException.
    """

    SCAN_CHUNK_SIZE = 500

    def __init__(
        self,
        settings: Settings | None = None,
        redis_client: redis.Redis | None = None,
    ) -> None:
        """Initialize store client.

        Args:
            settings: Connection settings; defaults to get_settings().
            redis_client: Optional Redis client for testing or DI.
        """
        self.settings = settings or get_settings()
        self.redis = redis_client
        self._connected = redis_client is not None
        self._subscriptions: list[RedisSubscription] = []

    @property
    def db(self) -> int:
        return self.settings.redis_db

    def _unavailable(self, reason: object) -> StoreUnavailableException:
        return StoreUnavailableException(
            self.settings.redis_host, self.settings.redis_port, str(reason)
        )

    def _require_client(self) -> redis.Redis:
        if not self.is_available() or self.redis is None:
            raise self._unavailable("not connected")
        return self.redis

    async def connect(self) -> None:
        """Establish Redis connection. Call on startup.

        Raises:
            StoreUnavailableException: If the server cannot be reached.
        """
        if self._connected:
            return
        password = self.settings.redis_password
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=self.settings.redis_socket_connect_timeout,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            await client.aclose()
            raise self._unavailable(e) from e
        self.redis = client
        self._connected = True
        logger.info(
            "Redis store connected: %s:%s/%s",
            self.settings.redis_host,
            self.settings.redis_port,
            self.settings.redis_db,
        )
        flags = self.settings.redis_notify_keyspace_events
        if flags is not None:
            try:
                await client.config_set("notify-keyspace-events", flags)
                logger.info("Keyspace notifications set to %r", flags)
            except redis.ResponseError as e:
                logger.warning("Could not set notify-keyspace-events: %s", e)

    async def disconnect(self) -> None:
        """Close open subscriptions and the Redis connection. Call on shutdown."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            await subscription.close()
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis store disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected."""
        return self._connected and self.redis is not None

    async def get(self, key: str) -> str | None:
        """Return the current string value of key, or None if missing."""
        client = self._require_client()
        try:
            return await client.get(key)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable(e) from e

    async def scan_prefix(self, pattern: str) -> dict[str, str]:
        """Return all string keys matching pattern with their values.

        Uses SCAN rather than KEYS so the server is never blocked, and MGET
        per chunk to keep round-trips low. Keys that vanish mid-scan or
        hold a non-string type are omitted.

        Args:
            pattern: Redis glob pattern (e.g. env*).

        Returns:
            Mapping of key to value.

        Raises:
            StoreUnavailableException: On connection or timeout errors.
        """
        client = self._require_client()
        entries: dict[str, str] = {}
        try:
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern, count=self.SCAN_CHUNK_SIZE):
                chunk.append(key)
                if len(chunk) >= self.SCAN_CHUNK_SIZE:
                    entries.update(await self._mget(client, chunk))
                    chunk = []
            if chunk:
                entries.update(await self._mget(client, chunk))
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable(e) from e
        logger.info("Scanned %s keys matching %s", len(entries), pattern)
        return entries

    @staticmethod
    async def _mget(client: redis.Redis, keys: list[str]) -> dict[str, str]:
        values = await client.mget(keys)
        return {k: v for k, v in zip(keys, values) if v is not None}

    async def subscribe(
        self, pattern: str, callback: ChangeCallback
    ) -> RedisSubscription:
        """Subscribe to keyspace changes for keys matching pattern.

        Returns after the PSUBSCRIBE is sent; notifications are handled on a
        background task that calls callback(key, value) with the re-read
        value (None for deleted or expired keys).

        Raises:
            StoreUnavailableException: If the subscription cannot be registered.
        """
        client = self._require_client()
        channel = keyspace_channel(self.db, pattern)
        pubsub = client.pubsub()
        try:
            await pubsub.psubscribe(channel)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            await pubsub.aclose()
            raise self._unavailable(e) from e
        subscription = RedisSubscription(channel, pubsub)
        subscription.task = asyncio.create_task(
            self._listen(client, subscription, callback),
            name=f"keyspace-listener:{pattern}",
        )
        self._subscriptions = [s for s in self._subscriptions if not s.closed]
        self._subscriptions.append(subscription)
        logger.info("Subscribed to %s", channel)
        return subscription

    async def _listen(
        self,
        client: redis.Redis,
        subscription: RedisSubscription,
        callback: ChangeCallback,
    ) -> None:
        """Dispatch notifications until cancelled or the connection drops."""
        try:
            async for raw in subscription.pubsub.listen():
                await self._dispatch(client, parse_notification(raw, self.db), callback)
        except redis.RedisError:
            logger.exception("Keyspace listener on %s stopped", subscription.channel)

    async def _dispatch(
        self,
        client: redis.Redis,
        notification: Notification,
        callback: ChangeCallback,
    ) -> None:
        if isinstance(notification, Message):
            try:
                value = await client.get(notification.key)
            except redis.RedisError:
                logger.exception(
                    "Failed to read back %s after %s",
                    notification.key,
                    notification.operation,
                )
                return
            try:
                callback(notification.key, value)
            except Exception:
                logger.exception("Change callback failed for %s", notification.key)
        elif isinstance(notification, Malformed):
            logger.warning(
                "Dropping malformed notification (%s): %r",
                notification.reason,
                notification.raw,
            )
        elif isinstance(notification, Subscribed):
            logger.debug("Subscription confirmed: %s", notification.pattern)
        else:
            logger.debug("Subscription ended: %s", notification.pattern)
