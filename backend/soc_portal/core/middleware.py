"""
SOC Portal - HTTP Middleware

RequestLoggingMiddleware binds the request id and the session cookies' eid and
socPortalId to the logging context for the lifetime of one request, then
reports method, path, status and timing. SecurityHeadersMiddleware stamps the
browser hardening headers on every response.
"""

import time
from typing import Callable, Dict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from soc_portal.core.config import settings
from soc_portal.core.cookies import SessionCookies
from soc_portal.core.logging_config import (
    logger,
    clear_context,
    set_request_id,
    set_eid,
    set_portal_id,
    generate_request_id,
)
from soc_portal.core.request_utils import get_client_ip


QUIET_PATHS = frozenset({"/", "/health", "/favicon.ico", "/docs", "/redoc", "/openapi.json"})
QUIET_PREFIXES = ("/storage/", "/api/storage/")


def should_skip_logging(path: str) -> bool:
    """Health probes, docs and static files are not logged per request"""
    return path in QUIET_PATHS or path.startswith(QUIET_PREFIXES)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Per-request correlation context, access log and X-Request-ID/X-Response-Time headers"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        session = SessionCookies.from_request(request)
        set_request_id(request_id)
        set_eid(session.eid)
        set_portal_id(session.soc_portal_id)

        method, path = request.method, request.url.path
        quiet = should_skip_logging(path)
        started = time.perf_counter()

        if not quiet:
            logger.debug(
                f"{method} {path} from {get_client_ip(request)}",
                extra={
                    "event_type": "http_request_start",
                    "user_agent": request.headers.get("user-agent", ""),
                }
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.log_error_with_context(
                exc,
                context=f"{method} {path}",
                duration_ms=round(self._elapsed_ms(started), 2),
            )
            raise
        else:
            elapsed = self._elapsed_ms(started)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{elapsed:.2f}ms"
            if not quiet:
                logger.log_request(
                    method, path, response.status_code, elapsed,
                    client_ip=get_client_ip(request),
                )
            return response
        finally:
            clear_context()

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000


SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
