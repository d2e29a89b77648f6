"""
Rate Limiting for SOC Portal API
================================
slowapi with in-process storage. Only routes decorated with
`@limiter.limit` are limited; /auth/login uses LOGIN_RATE_LIMIT against
password guessing.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from soc_portal.core.config import settings
from soc_portal.core.logging_config import logger
from soc_portal.core.request_utils import get_client_ip


def get_client_identifier(request: Request) -> str:
    """Rate limit key: proxy-aware client address"""
    return f"ip:{get_client_ip(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri="memory://",
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Envelope-shaped 429 with a Retry-After header"""
    retry_after = exc.detail.split(":")[-1].strip() if exc.detail else "60"

    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests. Please slow down.",
            "error": "RATE_LIMIT_EXCEEDED",
        },
        headers={"Retry-After": retry_after if retry_after.isdigit() else "60"},
    )
