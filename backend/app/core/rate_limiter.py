"""
Rate Limiting for UniConnect Portal API
=======================================
Implements rate limiting using slowapi.

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at a
redis:// URL to share counters between workers.

Special endpoints have their own limits:
- /auth/login: RATE_LIMIT_LOGIN (brute force protection)
- /auth/signup: RATE_LIMIT_SIGNUP
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging_config import logger


def get_user_identifier(request: Request) -> str:
    """Rate limit key for the caller; login and signup are anonymous so this is the client IP"""
    return f"ip:{get_remote_address(request)}"


# Create limiter instance
limiter = Limiter(
    key_func=get_user_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Handler for rate limit exceeded errors.

    Returns a JSON body in the same shape as every other error plus a
    Retry-After header.
    """
    retry_after = "60"

    logger.warning(
        f"[RateLimit] Exceeded for {get_user_identifier(request)}: {exc.detail}",
        extra={"event_type": "rate_limited", "http_path": request.url.path}
    )

    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests. Please slow down.",
            "code": "RATE_LIMITED",
        },
        headers={"Retry-After": retry_after},
    )


def auth_rate_limit():
    """Rate limit for login"""
    return limiter.limit(settings.RATE_LIMIT_LOGIN)


def signup_rate_limit():
    """Rate limit for account creation"""
    return limiter.limit(settings.RATE_LIMIT_SIGNUP)
