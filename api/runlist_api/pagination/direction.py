"""Traversal direction and sequence order shared by server and link builder."""

from enum import Enum
from typing import Optional


class Direction(str, Enum):
    """Which way to move through the ordered sequence."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Direction":
        """Parse a ``direction`` query value.

        Absent or unrecognised values fall back to ``FORWARD``.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.FORWARD
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.FORWARD


class SortOrder(str, Enum):
    """Order of the logical sequence by ``(created_at, id)``."""

    ASC = "asc"
    DESC = "desc"
