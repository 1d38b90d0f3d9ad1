"""Infrastructure: external key/value store clients."""
