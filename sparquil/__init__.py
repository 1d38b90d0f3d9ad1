"""sparquil: animated sketch driven by a Redis-mirrored environment."""

__version__ = "0.1.0"
