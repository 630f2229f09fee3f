"""Pagination module for cursor-based bidirectional pagination."""

from .direction import Direction, SortOrder
from .cursor import (
    CURSOR_VERSION,
    CursorData,
    SortKey,
    encode_cursor,
    decode_cursor
)
from .planner import (
    QuerySpec,
    plan,
    validate_page_size,
    build_where_clause,
    build_order_clause
)
from .links import (
    build_link,
    build_pagination_links,
    create_link_header
)

__all__ = [
    "Direction",
    "SortOrder",
    "CURSOR_VERSION",
    "CursorData",
    "SortKey",
    "encode_cursor",
    "decode_cursor",
    "QuerySpec",
    "plan",
    "validate_page_size",
    "build_where_clause",
    "build_order_clause",
    "build_link",
    "build_pagination_links",
    "create_link_header"
]
