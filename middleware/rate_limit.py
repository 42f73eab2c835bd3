# middleware/rate_limit.py
"""
Rate limiting configuration using slowapi.

Usage in route files:
    from middleware.rate_limit import limiter

    @router.post("/signin")
    @limiter.limit(RATE_LIMIT_AUTH)
    async def signin(request: Request, ...):
        ...
"""
import logging
import os

from fastapi import Request
from jose import JWTError, jwt
from slowapi import Limiter
from slowapi.util import get_remote_address

from config.settings import ACCESS_COOKIE_NAME, RATE_LIMIT_DEFAULT, RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)


def _get_rate_limit_key(request: Request) -> str:
    """
    Identify the caller for rate-limiting.

    Strategy:
      1. If the request carries an access-token cookie, bucket by its
         Supabase user id (sub claim) so the limit follows the user.
      2. Otherwise, fall back to client IP.
    """
    token = request.cookies.get(ACCESS_COOKIE_NAME)
    if token:
        try:
            # Unverified on purpose: the claim only picks a bucket, the
            # session itself is checked against Supabase by the route.
            sub = jwt.get_unverified_claims(token).get("sub")
            if sub:
                return f"user:{sub}"
        except JWTError:
            logger.debug("rate_limit_unparseable_access_cookie")

    return get_remote_address(request)


limiter = Limiter(
    key_func=_get_rate_limit_key,
    default_limits=[RATE_LIMIT_DEFAULT],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window",
    enabled=RATE_LIMIT_ENABLED,
)
