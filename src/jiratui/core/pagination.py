"""Paginated listings.

Listing endpoints page with ``startAt``/``maxResults`` and report ``total``
(best effort) and ``isLast`` (authoritative). A collection accumulates
consecutive pages; its cursor always describes the whole loaded window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PageCursor:
    """Position within a remotely paged listing."""

    start_at: int = 0
    max_results: int = 0
    total: int | None = None
    is_last: bool = True


@dataclass(frozen=True)
class PaginatedCollection[T]:
    """Ordered items plus the cursor of the window they came from."""

    items: tuple[T, ...] = ()
    cursor: PageCursor = field(default_factory=PageCursor)

    @classmethod
    def first_page(
        cls,
        items: tuple[T, ...] | list[T],
        *,
        start_at: int,
        max_results: int,
        total: int | None = None,
        is_last: bool | None = None,
    ) -> PaginatedCollection[T]:
        """Build a page from raw response fields, repairing inconsistent totals.

        A missing ``is_last`` is derived from ``total`` (or from a short page
        when the total is unknown too). A ``total`` smaller than what was
        actually returned is raised to match.
        """
        items = tuple(items)
        loaded_end = start_at + len(items)
        if total is not None and total < loaded_end:
            logger.warning(
                "Listing reported total=%d but returned up to %d; using %d",
                total,
                loaded_end,
                loaded_end,
            )
            total = loaded_end
        if is_last is None:
            if total is not None:
                is_last = loaded_end >= total
            else:
                is_last = len(items) < max_results or not items
        return cls(items, PageCursor(start_at, max_results, total, is_last))

    @classmethod
    def from_response(
        cls,
        data: dict[str, Any],
        items: list[T],
        *,
        start_at: int,
        max_results: int,
    ) -> PaginatedCollection[T]:
        """Build a page from a listing response body."""
        total = data.get("total")
        is_last = data.get("isLast")
        return cls.first_page(
            items,
            start_at=int(data.get("startAt", start_at)),
            max_results=int(data.get("maxResults", max_results)),
            total=int(total) if isinstance(total, int) else None,
            is_last=is_last if isinstance(is_last, bool) else None,
        )

    def __len__(self) -> int:
        return len(self.items)

    @property
    def has_more(self) -> bool:
        return not self.cursor.is_last

    def next_start(self) -> int:
        """Offset of the first item not yet loaded."""
        return self.cursor.start_at + len(self.items)

    def append(self, page: PaginatedCollection[T]) -> PaginatedCollection[T]:
        """Extend with a continuation page, keeping this window's origin.

        A page that does not start where this window ends (the listing moved
        under us) replaces the window instead of leaving a gap.
        """
        if page.cursor.start_at != self.next_start():
            logger.debug(
                "Continuation page starts at %d, expected %d; replacing window",
                page.cursor.start_at,
                self.next_start(),
            )
            return page
        return PaginatedCollection(
            self.items + page.items,
            replace(
                page.cursor,
                start_at=self.cursor.start_at,
                max_results=self.cursor.max_results or page.cursor.max_results,
            ),
        )

    def map_items[U](self, fn: Callable[[T], U]) -> PaginatedCollection[U]:
        return PaginatedCollection(tuple(fn(item) for item in self.items), self.cursor)


async def fetch_all_pages[T](
    fetch: Callable[[int, int], Awaitable[PaginatedCollection[T]]],
    page_size: int,
) -> PaginatedCollection[T]:
    """Walk a listing page by page until the server reports the last one.

    Used for small metadata listings (boards, sprints) that are always shown
    in full.
    """
    collected = await fetch(0, page_size)
    while collected.has_more:
        start = collected.next_start()
        page = await fetch(start, page_size)
        if not page.items:
            # Guard against servers that keep saying "not last" on empty pages.
            collected = PaginatedCollection(
                collected.items, replace(collected.cursor, is_last=True)
            )
            break
        collected = collected.append(page)
    return collected
