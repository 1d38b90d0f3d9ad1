"""Application: the environment cache mirrored from the key/value store."""

from sparquil.application.env_cache import EnvCache

__all__ = ["EnvCache"]
