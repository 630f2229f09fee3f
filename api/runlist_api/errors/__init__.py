"""Error handling module for the Run List API."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    NotFoundError,
    InternalServerError,
    ServiceUnavailableError,
    CursorDecodeError,
    InvalidPageSizeError,
    StoreAccessError,
    create_problem_response
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "BadRequestError",
    "NotFoundError",
    "InternalServerError",
    "ServiceUnavailableError",
    "CursorDecodeError",
    "InvalidPageSizeError",
    "StoreAccessError",
    "create_problem_response",
    "register_exception_handlers"
]
