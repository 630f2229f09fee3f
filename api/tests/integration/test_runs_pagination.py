"""Integration tests for run pagination against PostgreSQL."""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable

from runlist_api.db.models import Base
from runlist_api.db.runs import PostgresRunStore
from runlist_api.errors.problem_details import NotFoundError
from runlist_api.models.runs import RunListScope, RunStatus
from runlist_api.pagination import Direction, SortOrder
from runlist_api.presenters import RunListPresenter

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

pytestmark = pytest.mark.integration


async def ensure_schema(conn):
    dialect = postgresql.dialect()
    await conn.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")
    for table in Base.metadata.sorted_tables:
        await conn.execute(str(CreateTable(table, if_not_exists=True).compile(dialect=dialect)))
        for index in table.indexes:
            await conn.execute(str(CreateIndex(index, if_not_exists=True).compile(dialect=dialect)))


@pytest.fixture
async def seeded_scope(db_pool):
    """Create an isolated organization/project/job and remove it afterwards."""
    org_slug = f"org-{uuid4().hex[:8]}"
    async with db_pool.acquire() as conn:
        await ensure_schema(conn)
        org_id = await conn.fetchval(
            "INSERT INTO organizations (slug, title) VALUES ($1, $1) RETURNING id", org_slug
        )
        project_id = await conn.fetchval(
            "INSERT INTO projects (organization_id, slug, name) VALUES ($1, 'backend', 'Backend') RETURNING id",
            org_id
        )
        await conn.execute(
            "INSERT INTO jobs (project_id, slug, title) VALUES ($1, 'daily-report', 'Daily report')",
            project_id
        )

    try:
        yield RunListScope(organization_slug=org_slug, project_slug="backend", job_slug="daily-report")
    finally:
        async with db_pool.acquire() as conn:
            await conn.execute("DELETE FROM organizations WHERE id = $1", org_id)


@pytest.fixture
def store(db_pool):
    return PostgresRunStore(db_pool)


async def seed_runs(store, scope, count, start=1):
    return [
        await store.create_run(scope, status=RunStatus.SUCCESS, created_at=BASE_TIME + timedelta(minutes=n))
        for n in range(start, start + count)
    ]


class TestRunsPagination:
    """Walk real pages through the presenter and the PostgreSQL store."""

    @pytest.mark.asyncio
    async def test_forward_walk_visits_every_run_once(self, store, seeded_scope):
        await seed_runs(store, seeded_scope, 25)
        presenter = RunListPresenter(store, page_size=10)

        seen = []
        window = await presenter.get_page(seeded_scope)
        seen.extend(run.number for run in window.items)
        while window.next:
            window = await presenter.get_page(seeded_scope, Direction.FORWARD, window.next)
            seen.extend(run.number for run in window.items)

        assert seen == list(range(1, 26))

    @pytest.mark.asyncio
    async def test_backward_returns_previous_page(self, store, seeded_scope):
        await seed_runs(store, seeded_scope, 25)
        presenter = RunListPresenter(store, page_size=10)

        first = await presenter.get_page(seeded_scope)
        second = await presenter.get_page(seeded_scope, Direction.FORWARD, first.next)
        back = await presenter.get_page(seeded_scope, Direction.BACKWARD, second.previous)

        assert [run.number for run in second.items] == list(range(11, 21))
        assert [run.number for run in back.items] == list(range(1, 11))
        assert back.previous is None

    @pytest.mark.asyncio
    async def test_identical_timestamps_break_ties_on_id(self, store, seeded_scope):
        ids = [UUID(int=n) for n in (3, 1, 2)]
        for run_id in ids:
            await store.create_run(seeded_scope, created_at=BASE_TIME, run_id=run_id)
        presenter = RunListPresenter(store, page_size=1)

        seen = []
        cursor = None
        while True:
            window = await presenter.get_page(seeded_scope, Direction.FORWARD, cursor)
            seen.extend(run.id for run in window.items)
            if window.next is None:
                break
            cursor = window.next

        assert seen == sorted(ids)

    @pytest.mark.asyncio
    async def test_descending_order(self, store, seeded_scope):
        await seed_runs(store, seeded_scope, 5)
        presenter = RunListPresenter(store, page_size=3)

        window = await presenter.get_page(seeded_scope, order=SortOrder.DESC)

        assert [run.number for run in window.items] == [5, 4, 3]

    @pytest.mark.asyncio
    async def test_runs_inserted_between_requests_are_not_skipped(self, store, seeded_scope):
        await seed_runs(store, seeded_scope, 10)
        presenter = RunListPresenter(store, page_size=5)

        first = await presenter.get_page(seeded_scope)
        await seed_runs(store, seeded_scope, 3, start=11)
        second = await presenter.get_page(seeded_scope, Direction.FORWARD, first.next)

        assert [run.number for run in second.items] == [6, 7, 8, 9, 10]
        assert second.next is not None

    @pytest.mark.asyncio
    async def test_status_filter(self, store, seeded_scope):
        await seed_runs(store, seeded_scope, 3)
        await store.create_run(seeded_scope, status=RunStatus.FAILURE, created_at=BASE_TIME + timedelta(hours=1))
        failures = RunListScope(**{**seeded_scope.model_dump(), "statuses": [RunStatus.FAILURE]})

        window = await RunListPresenter(store, page_size=10).get_page(failures)

        assert [run.number for run in window.items] == [4]

    @pytest.mark.asyncio
    async def test_create_run_numbers_sequentially(self, store, seeded_scope):
        runs = await seed_runs(store, seeded_scope, 3)

        assert [run.number for run in runs] == [1, 2, 3]
        assert all(run.job_slug == "daily-report" for run in runs)

    @pytest.mark.asyncio
    async def test_create_run_unknown_job(self, store, seeded_scope):
        missing = RunListScope(**{**seeded_scope.model_dump(), "job_slug": "nope"})

        with pytest.raises(NotFoundError):
            await store.create_run(missing)
