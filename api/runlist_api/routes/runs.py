"""Run list API endpoints."""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from ..config import Settings, get_settings
from ..db.runs import PostgresRunStore
from ..models.runs import (
    RunListResponse, RunListScope, RunStatus, PaginationCursors, PaginationLinks
)
from ..pagination import Direction, SortOrder, build_pagination_links, create_link_header
from ..presenters.run_list import RunListPresenter, RunStore


logger = logging.getLogger(__name__)

runs_router = APIRouter(
    prefix="/orgs/{organization_slug}/projects/{project_slug}/jobs/{job_slug}/runs",
    tags=["Runs"],
    responses={
        400: {"description": "Bad Request - Invalid cursor"},
        503: {"description": "Service Unavailable - Run store unreachable"}
    }
)


def get_run_store() -> RunStore:
    """Run store dependency."""
    return PostgresRunStore()


def get_run_list_presenter(
    store: Annotated[RunStore, Depends(get_run_store)],
    settings: Annotated[Settings, Depends(get_settings)]
) -> RunListPresenter:
    """Presenter dependency using the configured page size."""
    return RunListPresenter(
        store,
        page_size=settings.default_page_size,
        retry_after=settings.store_retry_after
    )


@runs_router.get(
    "",
    response_model=RunListResponse,
    response_model_exclude_none=True,
    summary="List runs",
    description="List the runs of a job with bidirectional cursor-based pagination.",
    responses={
        200: {"description": "Runs retrieved successfully"}
    }
)
async def list_job_runs(
    organization_slug: str,
    project_slug: str,
    job_slug: str,
    request: Request,
    response: Response,
    presenter: Annotated[RunListPresenter, Depends(get_run_list_presenter)],
    cursor: Annotated[Optional[str], Query(description="Opaque cursor of the boundary run")] = None,
    direction: Annotated[Optional[str], Query(description="'forward' or 'backward'; defaults to forward")] = None,
    order: Annotated[SortOrder, Query(description="Order of the list by creation time")] = SortOrder.ASC,
    status: Annotated[Optional[List[RunStatus]], Query(description="Only runs with these statuses")] = None
) -> RunListResponse:
    """List runs of a job one page at a time.

    Runs are ordered by creation time with the run UUID as a tiebreaker, so
    pages stay stable while new runs are being created. ``cursor`` and
    ``direction`` come from the ``pagination`` block (or ``links``) of a
    previous response; all other query parameters are carried over into the
    navigation links unchanged.

    Args:
        organization_slug: Organization owning the project
        project_slug: Project owning the job
        job_slug: Job whose runs are listed
        request: FastAPI request object
        response: FastAPI response object for adding headers
        presenter: Run list presenter
        cursor: Cursor from a previous page
        direction: Traversal direction; absent or unknown values mean forward
        order: Sort order of the list - 'asc' or 'desc'
        status: Optional status filter (repeatable)

    Returns:
        One page of runs with neighbour cursors, navigation links and a Link header
    """
    scope = RunListScope(
        organization_slug=organization_slug,
        project_slug=project_slug,
        job_slug=job_slug,
        statuses=status or None
    )

    window = await presenter.get_page(
        scope,
        direction=Direction.parse(direction),
        cursor=cursor,
        order=order
    )

    path = request.url.path
    links = build_pagination_links(path, request.query_params, window.previous, window.next)

    link_header = create_link_header(
        base_url=str(request.url).split("?")[0],
        query=request.query_params,
        previous=window.previous,
        next=window.next
    )
    if link_header:
        response.headers["Link"] = link_header

    logger.info(
        f"Listed {len(window.items)} runs for {organization_slug}/{project_slug}/{job_slug}"
    )

    return RunListResponse(
        items=window.items,
        pagination=PaginationCursors(previous=window.previous, next=window.next),
        links=PaginationLinks(**links)
    )
