"""
Request validation errors and their HTTP rendering.

Every request DTO raises a subclass of `RequestError` when it cannot be turned
into a row. The error carries a `kind` (the variant name clients can switch on)
and a human readable message; `request_error_handler` renders it as a 400.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = (
    "Sorry but something unexpected happened, if this continue please contact the Admin"
)


class RequestError(Exception):
    """Base class of the 400 errors raised while validating a request."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_response(self) -> dict:
        return {
            "status": status.HTTP_400_BAD_REQUEST,
            "error": "Bad Request",
            "kind": self.kind,
            "message": self.message,
        }


def name_cannot_be_empty(error_cls):
    return error_cls("NameCannotBeEmpty", "Name cannot be empty")


def name_too_long(error_cls, name: str, max_length: int):
    return error_cls(
        "NameCannotBeLongerThan",
        f'Name "{name}" is longer than {max_length} characters',
    )


def check_name(error_cls, name: str, max_length: int) -> str:
    if not name:
        raise name_cannot_be_empty(error_cls)
    if len(name) > max_length:
        raise name_too_long(error_cls, name, max_length)
    return name


class QueryError(RequestError):
    """Malformed pagination, filter or sort query string."""


async def request_error_handler(request: Request, exc: RequestError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_response())


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.warning("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_MESSAGE},
    )
