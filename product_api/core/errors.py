# product_api/core/errors.py
from __future__ import annotations
from enum import Enum
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    STORE_UNAVAILABLE = "store_unavailable"
    INTERNAL = "internal"


# kind -> (default HTTP status, key used in the JSON body)
ERROR_TABLE: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.VALIDATION: (400, "error"),
    ErrorKind.AUTH: (403, "message"),
    ErrorKind.NOT_FOUND: (404, "message"),
    ErrorKind.STORE_UNAVAILABLE: (500, "error"),
    ErrorKind.INTERNAL: (500, "error"),
}

DEFAULT_MESSAGE = "Internal Server Error"


class ApiError(Exception):
    """
    Single error type for the whole request pipeline.
    The kind selects status code and body key through ERROR_TABLE;
    status_code only needs to be passed to override the table default.
    """

    def __init__(self, kind: ErrorKind, message: Optional[str] = None, *, status_code: Optional[int] = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGE
        self._status_code = status_code
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self._status_code or ERROR_TABLE.get(self.kind, (500, "error"))[0]

    @property
    def body_key(self) -> str:
        return ERROR_TABLE.get(self.kind, (500, "error"))[1]

    def to_body(self) -> dict:
        return {self.body_key: self.message}

    def __repr__(self) -> str:
        return f"ApiError(kind={self.kind.value!r}, status_code={self.status_code}, message={self.message!r})"


def validation_error(message: str) -> ApiError:
    return ApiError(ErrorKind.VALIDATION, message)


def not_found(message: str = "Product not found") -> ApiError:
    return ApiError(ErrorKind.NOT_FOUND, message)


def store_unavailable(message: str = "Product store is unavailable.") -> ApiError:
    return ApiError(ErrorKind.STORE_UNAVAILABLE, message)


# ----- Handlers ---------------------------------------------------------------

async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        # keep the chained driver error (if any) in the server log only
        logger.error("%s %s -> %s", request.method, request.url.path, repr(exc), exc_info=exc.__cause__ or exc)
    else:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def _describe(err: dict) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("query", "path", "body"))
    msg = err.get("msg", "Invalid request")
    return f"{loc}: {msg}" if loc else msg


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = _describe(errors[0]) if errors else "Invalid request"
    return await api_error_handler(request, validation_error(message))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": DEFAULT_MESSAGE})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
