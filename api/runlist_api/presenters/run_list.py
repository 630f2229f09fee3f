"""Presenter for paginated run lists."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Protocol, TypeVar

from ..config import get_settings
from ..models.runs import Run, RunListScope
from ..pagination import (
    Direction, SortOrder, SortKey, QuerySpec, plan, encode_cursor
)
from ..errors.problem_details import StoreAccessError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class RunStore(Protocol):
    """Anything that can answer a planned, bounded run read."""

    async def fetch_runs(self, scope: RunListScope, spec: QuerySpec) -> List[Run]:
        """Return at most ``spec.limit`` runs in the scan order of ``spec``."""
        ...


@dataclass(frozen=True)
class PaginationWindow(Generic[T]):
    """One page of items with cursors to its neighbours."""

    items: List[T]
    previous: Optional[str] = None
    next: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        pagination = {}
        if self.previous:
            pagination["previous"] = self.previous
        if self.next:
            pagination["next"] = self.next
        return {"items": list(self.items), "pagination": pagination}


def shape_window(spec: QuerySpec, rows: List[T]) -> PaginationWindow[T]:
    """Turn rows read for ``spec`` into a window in display order.

    ``rows`` are in scan order and may hold one probe row past the page.
    """
    has_more = len(rows) > spec.page_size
    items = list(rows[:spec.page_size])
    if spec.direction is Direction.BACKWARD:
        items.reverse()

    # A cursor means the request started next to an existing position, so the
    # side it came from is never the end of the sequence.
    came_from_cursor = spec.boundary is not None
    toward = encode_cursor(SortKey.of(items[-1])) if items else None
    back = encode_cursor(SortKey.of(items[0])) if items else None

    if spec.direction is Direction.FORWARD:
        next_cursor = toward if has_more else None
        if not came_from_cursor:
            previous_cursor = None
        elif items:
            previous_cursor = back
        else:
            previous_cursor = encode_cursor(spec.boundary)
    else:
        previous_cursor = back if has_more else None
        if not came_from_cursor:
            next_cursor = None
        elif items:
            next_cursor = toward
        else:
            next_cursor = encode_cursor(spec.boundary)

    return PaginationWindow(items=items, previous=previous_cursor, next=next_cursor)


class RunListPresenter:
    """Builds pages of a job's runs.

    Each call is independent: one planned read against the store, no caching.
    """

    def __init__(self, store: RunStore, page_size: int, retry_after: Optional[int] = None):
        self.store = store
        self.page_size = page_size
        self.retry_after = retry_after

    async def get_page(
        self,
        scope: RunListScope,
        direction: Direction = Direction.FORWARD,
        cursor: Optional[str] = None,
        page_size: Optional[int] = None,
        order: SortOrder = SortOrder.ASC
    ) -> PaginationWindow[Run]:
        """Fetch one page of runs.

        Args:
            scope: Tenant scope and filters
            direction: Traversal direction
            cursor: Cursor of the boundary item, None for an end of the list
            page_size: Overrides the presenter's configured page size
            order: Order of the logical sequence

        Returns:
            Window with runs in display order and neighbour cursors

        Raises:
            CursorDecodeError: If the cursor is malformed
            InvalidPageSizeError: If the page size is not a positive integer
            StoreAccessError: If the store fails to answer
        """
        spec = plan(
            direction,
            cursor,
            self.page_size if page_size is None else page_size,
            order
        )

        try:
            rows = await self.store.fetch_runs(scope, spec)
        except StoreAccessError:
            raise
        except Exception as e:
            logger.error(f"Unexpected run store failure: {type(e).__name__}: {e}")
            retry_after = self.retry_after if self.retry_after is not None else get_settings().store_retry_after
            raise StoreAccessError(
                f"Unexpected run store failure: {type(e).__name__}",
                retry_after=retry_after
            ) from e

        window = shape_window(spec, rows)
        logger.debug(
            f"Run page {spec.direction.value}/{spec.order.value} for job {scope.job_slug}: "
            f"{len(window.items)} items, previous={'yes' if window.previous else 'no'}, "
            f"next={'yes' if window.next else 'no'}"
        )
        return window
