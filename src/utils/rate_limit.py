"""Rate limiting applied to REST API endpoints as FastAPI dependency."""

from typing import Callable, Optional

from fastapi import Request

from ai.errors import RateLimitExceeded
from client import AIOrchestratorHolder
from configuration import configuration
import constants
from log import get_logger
from utils.endpoints import raise_http_error

logger = get_logger(__name__)

UNKNOWN_SUBJECT = "unknown"


def subject_from_request(request: Request) -> str:
    """Identify caller by authenticated user ID, or by client address."""
    user_id: Optional[str] = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    if request.client is not None and request.client.host:
        return f"ip:{request.client.host}"
    return UNKNOWN_SUBJECT


def is_exempt(request: Request) -> bool:
    """Check if caller is exempt from rate limiting.

    Local callers (loopback addresses) are exempt unless it is disabled in
    configuration.
    """
    if not configuration.rate_limits_configuration.exempt_loopback:
        return False
    return (
        request.client is not None
        and request.client.host in constants.LOOPBACK_ADDRESSES
    )


def rate_limit_dependency(
    policy: str,
    key_func: Callable[[Request], str] = subject_from_request,
    exempt: Callable[[Request], bool] = is_exempt,
) -> Callable[[Request], None]:
    """Create FastAPI dependency enforcing the named rate limit policy.

    Usage:
    ```python
    @router.post("/ai/generate", dependencies=[Depends(rate_limit_dependency("default"))])
    ```

    Raises:
        HTTPException: 429 Too Many Requests with error payload and
        `Retry-After` header when caller exceeded the limit.
    """

    def dependency(request: Request) -> None:
        if exempt(request):
            return
        limiter = AIOrchestratorHolder().get_rate_limiter(policy)
        try:
            limiter.hit(key_func(request))
        except RateLimitExceeded as e:
            raise_http_error(e)

    return dependency
