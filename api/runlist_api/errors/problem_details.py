"""Problem Details (RFC 9457) implementation for the Run List API."""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field
from fastapi import Request
from fastapi.responses import JSONResponse


class ProblemDetail(BaseModel):
    """Problem Details as defined in RFC 9457."""

    type: str = Field(default="about:blank", description="A URI reference that identifies the problem type")
    title: str = Field(description="A short, human-readable summary of the problem type")
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(default=None, description="A human-readable explanation specific to this occurrence")
    instance: Optional[str] = Field(default=None, description="A URI reference that identifies the specific occurrence")

    # Allow additional properties for extensions
    model_config = {"extra": "allow"}


class ProblemDetailException(Exception):
    """Base exception for Problem Details responses."""

    def __init__(
        self,
        status: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: str = "about:blank",
        instance: Optional[str] = None,
        **extensions: Any
    ):
        self.status = status
        self.title = title
        self.detail = detail
        self.type_uri = type_uri
        self.instance = instance
        self.extensions = extensions
        super().__init__(detail or title)

    def to_problem_detail(self, request: Optional[Request] = None) -> ProblemDetail:
        """Convert to ProblemDetail model."""
        instance = self.instance
        if instance is None and request:
            instance = str(request.url.path)

        problem = ProblemDetail(
            type=self.type_uri,
            title=self.title,
            status=self.status,
            detail=self.detail,
            instance=instance
        )

        for key, value in self.extensions.items():
            setattr(problem, key, value)

        return problem

    def to_response(self, request: Optional[Request] = None) -> JSONResponse:
        """Convert to JSONResponse with Problem Details format."""
        problem = self.to_problem_detail(request)
        return JSONResponse(
            status_code=self.status,
            content=problem.model_dump(mode="json", exclude_none=True),
            headers={"Content-Type": "application/problem+json"}
        )


class BadRequestError(ProblemDetailException):
    """400 Bad Request error."""

    def __init__(self, detail: str, **extensions: Any):
        super().__init__(
            status=400,
            title="Bad Request",
            detail=detail,
            **extensions
        )


class NotFoundError(ProblemDetailException):
    """404 Not Found error."""

    def __init__(self, detail: str = "Resource not found", **extensions: Any):
        super().__init__(
            status=404,
            title="Not Found",
            detail=detail,
            **extensions
        )


class InternalServerError(ProblemDetailException):
    """500 Internal Server Error."""

    def __init__(self, detail: str = "Internal server error", **extensions: Any):
        super().__init__(
            status=500,
            title="Internal Server Error",
            detail=detail,
            **extensions
        )


class ServiceUnavailableError(ProblemDetailException):
    """503 Service Unavailable error."""

    def __init__(
        self,
        detail: str = "Service temporarily unavailable",
        retry_after: Optional[int] = None,
        **extensions: Any
    ):
        if retry_after:
            extensions["retry_after"] = retry_after
        super().__init__(
            status=503,
            title="Service Unavailable",
            detail=detail,
            **extensions
        )

    def to_response(self, request: Optional[Request] = None) -> JSONResponse:
        """Convert to JSONResponse with Retry-After header."""
        response = super().to_response(request)
        if "retry_after" in self.extensions:
            response.headers["Retry-After"] = str(self.extensions["retry_after"])
        return response


class CursorDecodeError(BadRequestError):
    """Malformed or version-incompatible pagination cursor.

    Always surfaced to the client; a bad cursor never silently restarts
    pagination from the beginning of the list.
    """

    def __init__(self, detail: str = "Invalid pagination cursor", **extensions: Any):
        super().__init__(detail, **extensions)
        self.title = "Invalid Cursor"
        self.type_uri = "/problems/invalid-cursor"


class InvalidPageSizeError(InternalServerError):
    """Page size is missing, non-integer or non-positive."""

    def __init__(self, page_size: Any, **extensions: Any):
        super().__init__(
            detail=f"Page size must be a positive integer, got {page_size!r}",
            **extensions
        )
        self.title = "Invalid Page Size"
        self.type_uri = "/problems/invalid-page-size"
        self.page_size = page_size


class StoreAccessError(ServiceUnavailableError):
    """The backing store failed to answer a bounded query.

    Retryable by the caller; nothing in the pagination path retries on its own.
    """

    def __init__(
        self,
        detail: str = "Run store is unavailable",
        retry_after: Optional[int] = None,
        **extensions: Any
    ):
        super().__init__(detail=detail, retry_after=retry_after, retryable=True, **extensions)
        self.title = "Store Unavailable"
        self.type_uri = "/problems/store-unavailable"


def create_problem_response(
    status: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: str = "about:blank",
    instance: Optional[str] = None,
    request: Optional[Request] = None,
    **extensions: Any
) -> JSONResponse:
    """Create a Problem Details response."""
    if instance is None and request:
        instance = str(request.url.path)

    problem = ProblemDetail(
        type=type_uri,
        title=title,
        status=status,
        detail=detail,
        instance=instance
    )

    for key, value in extensions.items():
        setattr(problem, key, value)

    return JSONResponse(
        status_code=status,
        content=problem.model_dump(mode="json", exclude_none=True),
        headers={"Content-Type": "application/problem+json"}
    )
