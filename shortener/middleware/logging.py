"""
Logging Middleware for Request/Response Logging

This middleware logs all HTTP requests and responses for observability.
It captures:
- Request method and path
- Response status code
- Request processing time
- Client IP address

Client IP resolution honours the headers set by the proxies this service is
usually deployed behind (Cloudflare, nginx, generic load balancers).
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("shortener.access")


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Checked in order: CF-Connecting-IP, X-Real-IP, the first entry of
    X-Forwarded-For, then the socket peer.

    Args:
        request: FastAPI Request object

    Returns:
        IP address as string, or "unknown"
    """
    headers = request.headers

    cf_connecting_ip = headers.get("CF-Connecting-IP")
    if cf_connecting_ip:
        return cf_connecting_ip

    real_ip = headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    forwarded_for = headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request: METHOD PATH STATUS TIMEms IP:<client>."""

    async def dispatch(self, request: Request, call_next):
        client_ip = get_client_ip(request)
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {process_time*1000:.2f}ms "
            f"IP:{client_ip}"
        )

        response.headers["X-Process-Time"] = str(process_time)
        return response


def add_logging_middleware(app):
    """
    Add logging middleware to FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(LoggingMiddleware)
