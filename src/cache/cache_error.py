"""Any exception that can occur during cache operations."""


class CacheError(Exception):
    """Error raised when cache storage is unavailable or misbehaves."""
