"""
Error types raised by the route handlers and the handlers that turn
them into the ``{success, message, data}`` envelope.

Every failure leaves the API as an envelope with ``success`` false.
Unexpected failures are logged with their traceback and reported to
the client only as ``{"code": "internal_error"}``.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .responses import envelope

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, data: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.data = data


class ValidationError(ServiceError):
    status_code = 400
    code = "validation_error"


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"


class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"


class InternalError(ServiceError):
    pass


INTERNAL_ERROR_MESSAGE = "Internal server error"


def _field_errors(exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        # drop the "body"/"path"/"query" prefix
        loc = [str(part) for part in err.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return errors


async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        data = {"code": exc.code}
    else:
        data = exc.data
    return envelope(exc.message, data, status_code=exc.status_code, success=False)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return envelope(
        "Missing required fields or incorrect format",
        _field_errors(exc),
        status_code=400,
        success=False,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return envelope(
        str(exc.detail),
        None,
        status_code=exc.status_code,
        success=False,
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return envelope(
        INTERNAL_ERROR_MESSAGE,
        {"code": InternalError.code},
        status_code=500,
        success=False,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, unexpected_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
