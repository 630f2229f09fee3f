"""Query planning for bidirectional keyset pagination.

A page request ``(direction, cursor, page_size)`` is turned into a
:class:`QuerySpec` describing one bounded, ordered read. Rows are compared on
the tie-broken key ``(created_at, id)`` so adjacent pages never skip or repeat
an item, even when several rows share a timestamp.

The planner reads ``page_size + 1`` rows: the extra row only tells whether a
further page exists in the scan direction and is never returned to callers.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ..errors.problem_details import InvalidPageSizeError
from .cursor import SortKey, decode_cursor
from .direction import Direction, SortOrder


@dataclass(frozen=True)
class QuerySpec:
    """A bounded, ordered read against the run store."""

    direction: Direction
    order: SortOrder
    page_size: int
    boundary: Optional[SortKey] = None

    @property
    def limit(self) -> int:
        """Rows to fetch, including the boundary probe."""
        return self.page_size + 1

    @property
    def scan_descending(self) -> bool:
        """Whether the store is scanned in descending key order.

        Moving backward through an ascending sequence (or forward through a
        descending one) reads the keys from high to low.
        """
        return (self.order is SortOrder.DESC) != (self.direction is Direction.BACKWARD)

    @property
    def comparison(self) -> str:
        return "<" if self.scan_descending else ">"

    def matches(self, key: SortKey) -> bool:
        """Whether a key lies strictly beyond the boundary in scan order."""
        if self.boundary is None:
            return True
        if self.scan_descending:
            return key.as_tuple() < self.boundary.as_tuple()
        return key.as_tuple() > self.boundary.as_tuple()

    def sort_rows(self, rows: Iterable[Any]) -> List[Any]:
        """Order rows the way the store must return them."""
        return sorted(rows, key=lambda row: SortKey.of(row).as_tuple(), reverse=self.scan_descending)

    def apply(self, rows: Iterable[Any]) -> List[Any]:
        """Filter, order and bound rows in memory, mirroring the SQL query."""
        selected = [row for row in rows if self.matches(SortKey.of(row))]
        return self.sort_rows(selected)[:self.limit]


def validate_page_size(page_size: Any) -> int:
    """Return ``page_size`` if it is a positive integer.

    Raises:
        InvalidPageSizeError: For absent, non-integer or non-positive values
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise InvalidPageSizeError(page_size)
    return page_size


def plan(
    direction: Direction,
    cursor: Optional[str],
    page_size: int,
    order: SortOrder = SortOrder.ASC
) -> QuerySpec:
    """Plan the read for one page.

    Args:
        direction: Requested traversal direction
        cursor: Opaque cursor of the boundary item, or None to start at the
            logical beginning (forward) or end (backward) of the sequence
        page_size: Maximum number of items in the page
        order: Order of the logical sequence

    Returns:
        Query specification for the store

    Raises:
        InvalidPageSizeError: If page_size is not a positive integer
        CursorDecodeError: If the cursor cannot be decoded
    """
    page_size = validate_page_size(page_size)
    boundary = decode_cursor(cursor) if cursor else None
    return QuerySpec(
        direction=Direction(direction),
        order=SortOrder(order),
        page_size=page_size,
        boundary=boundary
    )


def build_where_clause(
    conditions: Sequence[str],
    params: Sequence[Any],
    spec: QuerySpec,
    column_prefix: str = ""
) -> Tuple[str, List[Any]]:
    """Build the WHERE clause for a planned read.

    Args:
        conditions: Scope conditions already referencing ``params`` by position
        params: Positional parameters for ``conditions``
        spec: Planned query
        column_prefix: Table alias for the sort columns, e.g. ``"r."``

    Returns:
        Tuple of (where_clause, parameters)
    """
    conditions = list(conditions)
    params = list(params)

    if spec.boundary is not None:
        created_at_param = f"${len(params) + 1}"
        id_param = f"${len(params) + 2}"
        op = spec.comparison
        created_at = f"{column_prefix}created_at"
        row_id = f"{column_prefix}id"
        conditions.append(
            f"({created_at} {op} {created_at_param}::timestamptz OR "
            f"({created_at} = {created_at_param}::timestamptz AND {row_id} {op} {id_param}::uuid))"
        )
        params.extend([spec.boundary.created_at, spec.boundary.id])

    where_clause = " AND ".join(conditions) if conditions else "TRUE"
    return where_clause, params


def build_order_clause(spec: QuerySpec, column_prefix: str = "") -> str:
    """Build the ORDER BY clause for a planned read."""
    direction = "DESC" if spec.scan_descending else "ASC"
    return f"ORDER BY {column_prefix}created_at {direction}, {column_prefix}id {direction}"
