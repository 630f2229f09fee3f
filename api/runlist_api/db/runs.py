"""Database operations for job runs."""

import asyncio
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

import asyncpg
from asyncpg import Pool

from ..config import get_settings
from ..models.runs import Run, RunRow, RunListScope, RunStatus
from ..pagination import QuerySpec, build_where_clause, build_order_clause
from ..errors.problem_details import NotFoundError, StoreAccessError
from .connection import get_db_pool


logger = logging.getLogger(__name__)

STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

RUN_COLUMNS = """
    r.id, r.number, r.status, r.created_at, r.started_at, r.completed_at,
    j.slug AS job_slug
"""

RUN_SCOPE_JOINS = """
    FROM job_runs r
    JOIN jobs j ON j.id = r.job_id
    JOIN projects p ON p.id = j.project_id
    JOIN organizations o ON o.id = p.organization_id
"""


def _store_error(action: str, exc: BaseException) -> StoreAccessError:
    logger.error(f"Database error {action}: {type(exc).__name__}: {exc}")
    return StoreAccessError(
        detail=f"Database error {action}",
        retry_after=get_settings().store_retry_after
    )


def build_list_query(scope: RunListScope, spec: QuerySpec) -> tuple[str, list]:
    """Build the bounded, ordered SQL read for one planned page.

    Args:
        scope: Tenant scope and filters
        spec: Planned query from the pagination planner

    Returns:
        Tuple of (query, parameters)
    """
    conditions = ["o.slug = $1", "p.slug = $2", "j.slug = $3"]
    params: list = [scope.organization_slug, scope.project_slug, scope.job_slug]

    if scope.statuses:
        params.append([status.value for status in scope.statuses])
        conditions.append(f"r.status = ANY(${len(params)}::text[])")

    where_clause, params = build_where_clause(conditions, params, spec, column_prefix="r.")
    order_clause = build_order_clause(spec, column_prefix="r.")

    query = f"""
        SELECT {RUN_COLUMNS}
        {RUN_SCOPE_JOINS}
        WHERE {where_clause}
        {order_clause}
        LIMIT ${len(params) + 1}
    """
    return query, params + [spec.limit]


class PostgresRunStore:
    """Run store backed by PostgreSQL through an asyncpg pool."""

    def __init__(self, pool: Optional[Pool] = None):
        self._pool = pool

    async def _get_pool(self) -> Pool:
        if self._pool is None:
            self._pool = await get_db_pool()
        return self._pool

    async def fetch_runs(self, scope: RunListScope, spec: QuerySpec) -> List[Run]:
        """Execute one bounded read for a planned page.

        Args:
            scope: Tenant scope and filters
            spec: Planned query

        Returns:
            Up to ``spec.limit`` runs in scan order

        Raises:
            StoreAccessError: If the database cannot answer the query
        """
        query, params = build_list_query(scope, spec)

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(query, *params)
        except STORE_ERRORS as e:
            raise _store_error("listing runs", e)

        runs = [RunRow.model_validate(dict(row)).to_run() for row in rows]
        logger.debug(
            f"Fetched {len(runs)} runs for {scope.organization_slug}/{scope.project_slug}/{scope.job_slug}"
        )
        return runs

    async def create_run(
        self,
        scope: RunListScope,
        status: RunStatus = RunStatus.PENDING,
        created_at: Optional[datetime] = None,
        run_id: Optional[UUID] = None
    ) -> Run:
        """Create a run for the job identified by ``scope``.

        The run number is allocated as one more than the job's highest number.

        Raises:
            NotFoundError: If the organization, project or job does not exist
            StoreAccessError: If the database operation fails
        """
        query = """
            WITH job AS (
                SELECT j.id, j.slug
                FROM jobs j
                JOIN projects p ON p.id = j.project_id
                JOIN organizations o ON o.id = p.organization_id
                WHERE o.slug = $1 AND p.slug = $2 AND j.slug = $3
            )
            INSERT INTO job_runs (id, job_id, number, status, created_at)
            SELECT
                COALESCE($5::uuid, gen_random_uuid()),
                job.id,
                COALESCE((SELECT MAX(number) FROM job_runs WHERE job_id = job.id), 0) + 1,
                $4,
                COALESCE($6::timestamptz, now())
            FROM job
            RETURNING id, number, status, created_at, started_at, completed_at,
                      (SELECT slug FROM job) AS job_slug
        """

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    scope.organization_slug,
                    scope.project_slug,
                    scope.job_slug,
                    RunStatus(status).value,
                    run_id,
                    created_at
                )
        except STORE_ERRORS as e:
            raise _store_error("creating run", e)

        if not row:
            raise NotFoundError(
                f"Job '{scope.job_slug}' not found in "
                f"'{scope.organization_slug}/{scope.project_slug}'"
            )

        run = RunRow.model_validate(dict(row)).to_run()
        logger.info(f"Created run #{run.number} ({run.id}) for job {scope.job_slug}")
        return run
