"""
Cursor pagination for projected event lists.

Internally every paged list is a ``Page`` carrying an optional next cursor.
Endpoints differ in how they signal termination, so two adapters render a page
for the boundary:

- ``hasMore`` endpoints (the user's event tab): the client passes back the id
  of the last item it has seen, and the next page starts after it
  (``CursorMode.EXCLUSIVE``).
- ``nextCursor`` endpoints (collections, collection events, timelines): the
  cursor is the id of the first item of the next page
  (``CursorMode.INCLUSIVE``).

Never merge the two response styles; each endpoint keeps its own.
"""

import logging
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class CursorMode(str, Enum):
    """How a cursor relates to the page it requests."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class PageRequest(BaseModel):
    """
    A page request: optional opaque cursor (an id) and a page size.

    Out-of-range limits raise ``ValidationError``; the route layer answers 400.
    """

    cursor: Optional[str] = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @field_validator("cursor", mode="before")
    @classmethod
    def blank_cursor_is_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class Page(BaseModel, Generic[T]):
    """
    One page of items plus the cursor for the next page (None on the last page).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: List[T] = Field(default_factory=list)
    next_cursor: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None

    @classmethod
    def from_overfetch(
        cls,
        rows: Sequence[T],
        limit: int,
        *,
        key: Callable[[T], Any],
        mode: CursorMode = CursorMode.INCLUSIVE,
    ) -> "Page[T]":
        """
        Build a page from rows fetched with ``take = limit + 1``.

        The extra row only signals that another page exists; it is not returned.

        Args:
            rows: Rows in display order, at most ``limit + 1`` of them
            limit: Page size requested by the client
            key: Returns the cursor id of a row
            mode: Cursor convention of the endpoint

        Returns:
            Page with at most ``limit`` items
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")

        items = list(rows[:limit])
        if len(rows) <= limit:
            return cls(items=items, next_cursor=None)

        anchor = rows[limit] if mode == CursorMode.INCLUSIVE else items[-1]
        return cls(items=items, next_cursor=str(key(anchor)))

    def map(self, fn: Callable[[T], Any]) -> "Page":
        """Return a page with ``fn`` applied to every item, keeping the cursor."""
        return Page(items=[fn(item) for item in self.items], next_cursor=self.next_cursor)


def paginate(
    items: Sequence[T],
    request: PageRequest,
    *,
    key: Callable[[T], Any],
    mode: CursorMode = CursorMode.INCLUSIVE,
) -> Page[T]:
    """
    Page through an already ordered in-memory sequence.

    An unknown cursor yields an empty last page.
    """
    start = 0
    if request.cursor is not None:
        ids = [str(key(item)) for item in items]
        try:
            position = ids.index(request.cursor)
        except ValueError:
            logger.debug("Cursor %s not found; returning empty page", request.cursor)
            return Page(items=[], next_cursor=None)
        start = position if mode == CursorMode.INCLUSIVE else position + 1

    window = items[start : start + request.limit + 1]
    return Page.from_overfetch(window, request.limit, key=key, mode=mode)


# ============================================================================
# BOUNDARY ADAPTERS
# ============================================================================


def _dump_item(item: Any) -> Any:
    if hasattr(item, "to_wire"):
        return item.to_wire()
    if isinstance(item, BaseModel):
        return item.model_dump(by_alias=True, exclude_none=True, mode="json")
    return item


def to_has_more_response(page: Page, items_key: str = "events") -> dict:
    """Render a page for an endpoint that signals termination with ``hasMore``."""
    return {
        items_key: [_dump_item(item) for item in page.items],
        "hasMore": page.has_more,
    }


def to_next_cursor_response(page: Page, items_key: str = "events") -> dict:
    """Render a page for an endpoint that signals termination with ``nextCursor``."""
    return {
        items_key: [_dump_item(item) for item in page.items],
        "nextCursor": page.next_cursor,
    }
