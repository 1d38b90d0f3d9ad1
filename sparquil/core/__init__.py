"""Core: settings, constants and system lifespan."""
