"""Rate limiting service for API endpoints."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.portal.config import settings


def get_subject_or_ip(request: Request) -> str:
    """
    Extract the session subject or fall back to IP address.

    Used as the key_func for rate limiting:
    - Requests with a resolved session: rate limited per subject ID
    - Anonymous requests (login, registration): rate limited per IP address

    Args:
        request: FastAPI request object

    Returns:
        Subject ID key or IP address key
    """
    session = getattr(request.state, "session", None)

    if session is not None and session.subject_id:
        return f"user:{session.subject_id}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_subject_or_ip,
    default_limits=[],
    storage_uri="memory://",  # Single-instance deployment
    enabled=settings.rate_limit_enabled,
)


class RateLimitTiers:
    """Rate limit tiers for different endpoint categories."""

    # Page loads behind the authorization gate
    DEFAULT = ["100 per minute", "1000 per hour"]

    # Credential handling and state-changing operations
    WRITE = ["30 per minute", "200 per hour"]


# Note: These decorators require the endpoint to have a 'request: Request' parameter
default_rate_limit = limiter.limit(";".join(RateLimitTiers.DEFAULT))
write_rate_limit = limiter.limit(";".join(RateLimitTiers.WRITE))
