"""serve-api: local query endpoint and static file server."""

__version__ = "0.1.0"
