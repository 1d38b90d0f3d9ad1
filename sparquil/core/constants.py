"""Core constants: env namespace and keyspace notification channels.

Single source of truth for the key grammar prefix and the Redis
keyspace channel format.
"""

# Namespace literal every mirrored key must start with
ENV_NAMESPACE = "env"

# Pattern mirrored by default (glob, as understood by SCAN/PSUBSCRIBE)
DEFAULT_ENV_PATTERN = "env*"

# Redis keyspace notification channel prefix; {db} is the database index
KEYSPACE_CHANNEL_PREFIX = "__keyspace@{db}__:"


def keyspace_channel(db: int, pattern: str) -> str:
    """Channel (or channel pattern) carrying keyspace events for pattern."""
    return f"{KEYSPACE_CHANNEL_PREFIX.format(db=db)}{pattern}"


def key_from_keyspace_channel(db: int, channel: str) -> str | None:
    """Return the key name encoded in a keyspace channel, or None if foreign."""
    prefix = KEYSPACE_CHANNEL_PREFIX.format(db=db)
    if not channel.startswith(prefix):
        return None
    return channel[len(prefix):] or None
