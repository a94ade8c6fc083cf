"""Decorator that makes sure the object is 'connected' according to it's connected predicate."""

from functools import wraps
from typing import Any, Callable


def connection(f: Callable) -> Callable:
    """Decorate a method to reconnect the storage when the connection is lost.

    The decorated object needs to provide `connected()` and `connect()`
    methods.

    Example:
    ```python
    @connection
    def get(self, key: str) -> Optional[str]:
        ...
    ```
    """

    @wraps(f)
    def wrapper(connectable: Any, *args: Any, **kwargs: Any) -> Any:
        if not connectable.connected():
            connectable.connect()
        return f(connectable, *args, **kwargs)

    return wrapper
