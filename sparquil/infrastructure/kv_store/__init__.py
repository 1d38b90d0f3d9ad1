"""Key/value store: protocol, Redis client and keyspace notifications."""

from sparquil.infrastructure.kv_store.kv_protocol import (
    ChangeCallback,
    KVStoreProtocol,
    SubscriptionProtocol,
)
from sparquil.infrastructure.kv_store.notifications import (
    Malformed,
    Message,
    Notification,
    Subscribed,
    Unsubscribed,
    parse_notification,
)
from sparquil.infrastructure.kv_store.redis_store import (
    RedisKVStore,
    RedisSubscription,
)

__all__ = [
    "ChangeCallback",
    "KVStoreProtocol",
    "Malformed",
    "Message",
    "Notification",
    "RedisKVStore",
    "RedisSubscription",
    "Subscribed",
    "SubscriptionProtocol",
    "Unsubscribed",
    "parse_notification",
]
