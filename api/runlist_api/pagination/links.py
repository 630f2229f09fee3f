"""Navigation links for paginated lists."""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode

from .direction import Direction


QueryInput = Union[str, Mapping[str, Any], None]

CURSOR_PARAM = "cursor"
DIRECTION_PARAM = "direction"


def _query_items(query: QueryInput) -> List[Tuple[str, str]]:
    if query is None:
        return []
    if isinstance(query, str):
        return parse_qsl(query.lstrip("?"), keep_blank_values=True)
    if hasattr(query, "multi_items"):
        return [(k, str(v)) for k, v in query.multi_items()]
    return [(k, str(v)) for k, v in query.items()]


def _set_param(items: List[Tuple[str, str]], key: str, value: str) -> List[Tuple[str, str]]:
    """Replace the first ``key`` in place, drop later duplicates, append if absent."""
    result = []
    replaced = False
    for k, v in items:
        if k == key:
            if not replaced:
                result.append((key, value))
                replaced = True
            continue
        result.append((k, v))
    if not replaced:
        result.append((key, value))
    return result


def build_link(
    current_path: str,
    current_query: QueryInput,
    cursor: Optional[str],
    direction: Direction
) -> Optional[str]:
    """Build the URL that navigates to ``cursor`` in ``direction``.

    Args:
        current_path: Path of the current location
        current_query: Current query string or parameters
        cursor: Cursor to navigate to; None when there is nothing that way
        direction: Direction to request

    Returns:
        The path with ``cursor`` and ``direction`` overwritten and all other
        parameters preserved, or None when ``cursor`` is absent
    """
    if not cursor:
        return None

    items = _query_items(current_query)
    items = _set_param(items, CURSOR_PARAM, cursor)
    items = _set_param(items, DIRECTION_PARAM, Direction(direction).value)
    return f"{current_path}?{urlencode(items)}"


def build_pagination_links(
    current_path: str,
    current_query: QueryInput,
    previous: Optional[str],
    next: Optional[str]
) -> Dict[str, str]:
    """Links for the previous (backward) and next (forward) buttons."""
    links = {}
    previous_link = build_link(current_path, current_query, previous, Direction.BACKWARD)
    if previous_link:
        links["previous"] = previous_link
    next_link = build_link(current_path, current_query, next, Direction.FORWARD)
    if next_link:
        links["next"] = next_link
    return links


def create_link_header(
    base_url: str,
    query: QueryInput,
    previous: Optional[str] = None,
    next: Optional[str] = None
) -> Optional[str]:
    """Create Link header for pagination as per RFC 8288.

    Args:
        base_url: Base URL for the resource
        query: Current query parameters
        previous: Cursor for the previous page
        next: Cursor for the next page

    Returns:
        Link header value or None if no links
    """
    links = build_pagination_links(base_url, query, previous, next)
    values = []
    if "next" in links:
        values.append(f'<{links["next"]}>; rel="next"')
    if "previous" in links:
        values.append(f'<{links["previous"]}>; rel="prev"')
    return ", ".join(values) if values else None
