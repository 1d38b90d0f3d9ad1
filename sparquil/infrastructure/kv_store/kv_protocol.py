"""Key/value store protocol consumed by the environment cache (DIP)."""

from collections.abc import Callable
from typing import Protocol

ChangeCallback = Callable[[str, str | None], None]


class SubscriptionProtocol(Protocol):
    """Active listening relation between a subscriber and the store."""

    @property
    def active(self) -> bool:
        """Return True while notifications may still be delivered."""
        ...

    async def close(self) -> None:
        """Stop delivery and release the notification connection."""
        ...


class KVStoreProtocol(Protocol):
    """Protocol for key/value stores like Redis."""

    async def scan_prefix(self, pattern: str) -> dict[str, str]:
        """Return every key matching the glob pattern with its current value."""
        ...

    async def subscribe(
        self, pattern: str, callback: ChangeCallback
    ) -> SubscriptionProtocol:
        """Call callback(key, current_value) for each change to a key matching pattern.

        Returns once the subscription is registered; delivery is asynchronous.
        current_value is None when the key no longer exists.
        """
        ...
