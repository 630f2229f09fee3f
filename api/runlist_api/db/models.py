"""SQLAlchemy models for the run list schema."""

from sqlalchemy import (
    CheckConstraint, Column, Text, Integer, DateTime, ForeignKey, Index, UniqueConstraint, text
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from ..models.runs import RunStatus

# Create base class for models
Base = declarative_base()

RUN_STATUSES = tuple(status.value for status in RunStatus)


class Organization(Base):
    """Organizations table model (tenant root)."""
    __tablename__ = 'organizations'

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text('gen_random_uuid()'))
    slug = Column(Text, nullable=False, unique=True)
    title = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Project(Base):
    """Projects table model."""
    __tablename__ = 'projects'

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text('gen_random_uuid()'))
    organization_id = Column(UUID(as_uuid=True), ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False)
    slug = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('organization_id', 'slug', name='projects_organization_id_slug_key'),
    )


class Job(Base):
    """Jobs table model."""
    __tablename__ = 'jobs'

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text('gen_random_uuid()'))
    project_id = Column(UUID(as_uuid=True), ForeignKey('projects.id', ondelete='CASCADE'), nullable=False)
    slug = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('project_id', 'slug', name='jobs_project_id_slug_key'),
    )


class JobRun(Base):
    """Job runs table model; the paginated sequence."""
    __tablename__ = 'job_runs'

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text('gen_random_uuid()'))
    job_id = Column(UUID(as_uuid=True), ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    number = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'PENDING'"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    started_at = Column(DateTime(timezone=True))
    completed_at = Column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint('job_id', 'number', name='job_runs_job_id_number_key'),
        Index('job_runs_job_created_id', 'job_id', 'created_at', 'id'),
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in RUN_STATUSES) + ")",
            name='job_runs_status_check'
        ),
    )
