# product_api/api/middleware.py
"""
HTTP middleware: request logging and the shared-secret API key gate.

Starlette runs the last-added middleware first, so main.py adds
ApiKeyMiddleware before RequestLoggingMiddleware to get logging -> auth.
"""
from datetime import datetime, timezone
from typing import Callable, Optional
import logging
import secrets
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from product_api.core.config import get_settings
from product_api.core.errors import ApiError, ErrorKind

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
FORBIDDEN_MESSAGE = "Forbidden: Invalid API Key"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Observes every request; never short-circuits or alters it."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        stamp = datetime.now(timezone.utc).isoformat()
        logger.info("[%s] %s %s", stamp, request.method, request.url.path)

        start = time.perf_counter()
        response = await call_next(request)
        logger.debug(
            "%s %s -> %s elapsed=%.4fs",
            request.method, request.url.path, response.status_code, time.perf_counter() - start,
        )
        return response


def api_key_matches(supplied: Optional[str], expected: Optional[str]) -> bool:
    """Exact comparison, no trimming or case folding. An unset secret matches nothing."""
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode(), expected.encode())


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """
    Gates every path and verb behind one shared secret.
    The expected key is read from settings per request so tests can swap it.
    """

    def __init__(self, app, get_expected_key: Optional[Callable[[], Optional[str]]] = None):
        super().__init__(app)
        self._get_expected_key = get_expected_key or (lambda: get_settings().API_KEY)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not api_key_matches(request.headers.get(API_KEY_HEADER), self._get_expected_key()):
            err = ApiError(ErrorKind.AUTH, FORBIDDEN_MESSAGE)
            logger.warning("Rejected %s %s: missing or invalid API key", request.method, request.url.path)
            return JSONResponse(status_code=err.status_code, content=err.to_body())
        return await call_next(request)
