"""Opaque cursor encoding for keyset pagination."""

import base64
import binascii
import json
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors.problem_details import CursorDecodeError


CURSOR_VERSION = 1


class SortKey(BaseModel):
    """Tie-broken position of an item: creation time, then id."""

    created_at: datetime = Field(description="Primary sort field")
    id: UUID = Field(description="Unique tie-breaker")

    model_config = ConfigDict(frozen=True)

    def as_tuple(self) -> tuple[datetime, UUID]:
        return (self.created_at, self.id)

    @classmethod
    def of(cls, item) -> "SortKey":
        """Build the sort key of a row, model or mapping."""
        if isinstance(item, dict):
            return cls(created_at=item["created_at"], id=item["id"])
        return cls(created_at=item.created_at, id=item.id)


class CursorData(BaseModel):
    """Wire payload of a cursor."""

    v: int = Field(description="Encoding version")
    created_at: datetime = Field(description="Timestamp for pagination")
    id: UUID = Field(description="UUID for stable ordering")

    model_config = ConfigDict(extra="forbid")


def encode_cursor(sort_key: SortKey) -> str:
    """Encode a sort key into an opaque, URL-safe cursor.

    Args:
        sort_key: Sort key of the boundary item

    Returns:
        Unpadded base64url string (characters ``A-Z a-z 0-9 - _`` only)
    """
    cursor_data = CursorData(v=CURSOR_VERSION, created_at=sort_key.created_at, id=sort_key.id)
    raw = cursor_data.model_dump_json().encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_cursor(cursor: str) -> SortKey:
    """Decode a cursor produced by :func:`encode_cursor`.

    Args:
        cursor: Opaque cursor string

    Returns:
        The sort key the cursor points at

    Raises:
        CursorDecodeError: If the cursor is empty, malformed or was produced
            by an incompatible encoding version
    """
    if not cursor:
        raise CursorDecodeError("Empty cursor provided")

    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeError, binascii.Error, ValueError) as e:
        raise CursorDecodeError(f"Invalid cursor format: {e}")

    if not isinstance(payload, dict):
        raise CursorDecodeError("Invalid cursor format: expected an object")

    version = payload.get("v")
    if type(version) is not int or version != CURSOR_VERSION:
        raise CursorDecodeError(f"Unsupported cursor version: {version!r}")

    try:
        cursor_data = CursorData.model_validate(payload)
    except ValidationError as e:
        raise CursorDecodeError(f"Invalid cursor contents: {e.error_count()} invalid field(s)")

    return SortKey(created_at=cursor_data.created_at, id=cursor_data.id)
