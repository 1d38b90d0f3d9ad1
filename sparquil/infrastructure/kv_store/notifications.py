"""Keyspace notification variants and parsing of raw pub/sub messages.

redis-py delivers pub/sub traffic as loosely structured dicts. Every raw
message is mapped to exactly one variant here; anything unexpected
becomes Malformed so the listener can drop it and keep running.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sparquil.core.constants import key_from_keyspace_channel

SUBSCRIBE_TYPES = frozenset({"subscribe", "psubscribe"})
UNSUBSCRIBE_TYPES = frozenset({"unsubscribe", "punsubscribe"})
MESSAGE_TYPES = frozenset({"message", "pmessage"})


@dataclass(frozen=True)
class Subscribed:
    """Server acknowledged a (pattern) subscription."""

    pattern: str


@dataclass(frozen=True)
class Message:
    """A key in the watched keyspace changed; operation is e.g. "set" or "del"."""

    key: str
    operation: str


@dataclass(frozen=True)
class Unsubscribed:
    """Server acknowledged an unsubscribe."""

    pattern: str


@dataclass(frozen=True)
class Malformed:
    """Payload that could not be interpreted."""

    raw: Any
    reason: str


Notification = Subscribed | Message | Unsubscribed | Malformed


def _as_text(value: Any) -> str | None:
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(value, str):
        return value
    return None


def parse_notification(raw: Any, db: int) -> Notification:
    """Map a raw redis-py pub/sub message to a Notification.

    Args:
        raw: Message dict as yielded by PubSub.listen().
        db: Database index the keyspace channel refers to.

    Returns:
        Subscribed, Message, Unsubscribed or Malformed.
    """
    if not isinstance(raw, dict):
        return Malformed(raw, "not a mapping")
    msg_type = _as_text(raw.get("type"))
    channel = _as_text(raw.get("channel"))
    if msg_type is None:
        return Malformed(raw, "missing type")
    if msg_type in SUBSCRIBE_TYPES:
        return Subscribed(channel or "")
    if msg_type in UNSUBSCRIBE_TYPES:
        return Unsubscribed(channel or "")
    if msg_type not in MESSAGE_TYPES:
        return Malformed(raw, f"unknown type {msg_type!r}")
    if channel is None:
        return Malformed(raw, "missing channel")
    key = key_from_keyspace_channel(db, channel)
    if key is None:
        return Malformed(raw, f"channel {channel!r} is not a keyspace channel")
    operation = _as_text(raw.get("data"))
    if not operation:
        return Malformed(raw, "missing operation")
    return Message(key=key, operation=operation)
