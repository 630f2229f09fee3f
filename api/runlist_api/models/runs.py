"""Pydantic models for job runs."""

from datetime import datetime
from enum import Enum
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict


class RunStatus(str, Enum):
    """Lifecycle status of a job run."""

    PENDING = "PENDING"
    QUEUED = "QUEUED"
    STARTED = "STARTED"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    TIMED_OUT = "TIMED_OUT"
    CANCELED = "CANCELED"


class Run(BaseModel):
    """A single run of a job."""

    id: UUID = Field(description="Run UUID")
    number: int = Field(description="Per-job run number shown in the UI")
    status: RunStatus = Field(description="Current run status")
    job_slug: str = Field(description="Slug of the job this run belongs to")
    created_at: datetime = Field(description="Creation timestamp")
    started_at: Optional[datetime] = Field(default=None, description="Start timestamp")
    completed_at: Optional[datetime] = Field(default=None, description="Completion timestamp")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "number": 42,
                "status": "SUCCESS",
                "job_slug": "send-welcome-email",
                "created_at": "2024-01-01T12:00:00Z",
                "started_at": "2024-01-01T12:00:01Z",
                "completed_at": "2024-01-01T12:00:05Z"
            }
        }
    )


class RunListScope(BaseModel):
    """Tenant scope and filters of a run list request."""

    organization_slug: str
    project_slug: str
    job_slug: str
    statuses: Optional[List[RunStatus]] = None

    model_config = ConfigDict(frozen=True)


class PaginationCursors(BaseModel):
    """Cursors to the neighbouring pages."""

    previous: Optional[str] = Field(default=None, description="Cursor for the previous page")
    next: Optional[str] = Field(default=None, description="Cursor for the next page")


class PaginationLinks(BaseModel):
    """Ready-made navigation URLs for the neighbouring pages."""

    previous: Optional[str] = Field(default=None, description="URL of the previous page")
    next: Optional[str] = Field(default=None, description="URL of the next page")


class RunListResponse(BaseModel):
    """Response model for listing runs."""

    items: List[Run] = Field(description="Runs in display order")
    pagination: PaginationCursors = Field(description="Cursors to neighbouring pages")
    links: PaginationLinks = Field(default_factory=PaginationLinks, description="Navigation URLs")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [
                    {
                        "id": "550e8400-e29b-41d4-a716-446655440000",
                        "number": 42,
                        "status": "SUCCESS",
                        "job_slug": "send-welcome-email",
                        "created_at": "2024-01-01T12:00:00Z",
                        "started_at": "2024-01-01T12:00:01Z",
                        "completed_at": "2024-01-01T12:00:05Z"
                    }
                ],
                "pagination": {
                    "next": "eyJ2IjoxLCJjcmVhdGVkX2F0IjoiMjAyNC0wMS0wMVQxMjowMDowMFoiLCJpZCI6IjU1MGU4NDAwLWUyOWItNDFkNC1hNzE2LTQ0NjY1NTQ0MDAwMCJ9"
                },
                "links": {
                    "next": "/v1/orgs/acme/projects/web/jobs/send-welcome-email/runs?cursor=eyJ2IjoxLCJjcmVhdGVkX2F0IjoiMjAyNC0wMS0wMVQxMjowMDowMFoiLCJpZCI6IjU1MGU4NDAwLWUyOWItNDFkNC1hNzE2LTQ0NjY1NTQ0MDAwMCJ9&direction=forward"
                }
            }
        }
    )


# Database row model (for internal use)
class RunRow(BaseModel):
    """Model representing a job_runs row joined with its job slug."""

    id: UUID
    number: int
    status: RunStatus
    job_slug: str
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_run(self) -> Run:
        """Convert to public Run model."""
        return Run(
            id=self.id,
            number=self.number,
            status=self.status,
            job_slug=self.job_slug,
            created_at=self.created_at,
            started_at=self.started_at,
            completed_at=self.completed_at
        )
