"""Domain exceptions for sparquil.

Only conditions that must abort the caller are exceptions. Invalid env
keys and unparsable values are expected input and are handled by
logging and falling back, never by raising.
"""

from typing import Any


class SparquilException(Exception):
    """Base exception for all sparquil errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. host, port).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class StoreUnavailableException(SparquilException):
    """Raised when the key/value store cannot be reached (fatal at start-up)."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        super().__init__(
            f"Key/value store unavailable at {host}:{port}: {reason}",
            "STORE_UNAVAILABLE",
            {"host": host, "port": port, "reason": reason},
        )


class SketchOptionsException(SparquilException):
    """Raised when sketch options fail validation."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Invalid sketch options: {reason}",
            "INVALID_SKETCH_OPTIONS",
            {"reason": reason},
        )
