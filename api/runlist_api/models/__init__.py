"""Pydantic models for the Run List API."""

from .runs import (
    RunStatus,
    Run,
    RunRow,
    RunListScope,
    PaginationCursors,
    PaginationLinks,
    RunListResponse
)

__all__ = [
    "RunStatus",
    "Run",
    "RunRow",
    "RunListScope",
    "PaginationCursors",
    "PaginationLinks",
    "RunListResponse"
]
