"""Concurrent pagination over the indexer's event stream.

Each round issues ``concurrency`` page requests at consecutive offsets and
waits for all of them. Offsets are assigned before any response is seen, so
no offset is ever requested twice. Syncing continues only while every page in
the round came back full; one short page ends the stream for the whole round.

The loop is a fold over an immutable :class:`SyncCursor`; the only side
effect is the injected ``fetch_page`` coroutine.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
DEFAULT_CONCURRENCY = 4

PageFetcher = Callable[[str, int, int], Awaitable[list[dict[str, Any]]]]


@dataclass(frozen=True)
class SyncCursor:
    """Next offset to request plus every page collected so far."""

    offset: int = 0
    pages: tuple[tuple[dict[str, Any], ...], ...] = ()
    rounds: int = 0


def plan_round(cursor: SyncCursor, page_size: int, concurrency: int) -> list[int]:
    """Offsets for the next round: one per concurrent slot."""
    return [cursor.offset + i * page_size for i in range(concurrency)]


def round_is_full(pages: Sequence[Sequence[Any]], page_size: int) -> bool:
    return all(len(page) >= page_size for page in pages)


def advance_cursor(
    cursor: SyncCursor,
    pages: Sequence[Sequence[dict[str, Any]]],
    page_size: int,
) -> SyncCursor:
    """Return a new cursor past one round of ``pages``.

    The offset moves by ``page_size`` per request issued, not per event
    received.
    """
    return SyncCursor(
        offset=cursor.offset + page_size * len(pages),
        pages=cursor.pages + tuple(tuple(page) for page in pages),
        rounds=cursor.rounds + 1,
    )


def finalize_events(
    pages: Iterable[Iterable[dict[str, Any]]],
    module_hash_blacklist: Iterable[str] = (),
    newest_first: bool = False,
) -> list[dict[str, Any]]:
    """Flatten pages, drop blacklisted module hashes, and sort by height.

    The sort is stable, so events at the same height keep page order.
    """
    blacklist = set(module_hash_blacklist)
    events = [
        event
        for page in pages
        for event in page
        if event.get("moduleHash") not in blacklist
    ]
    return sorted(events, key=lambda event: event.get("height", 0), reverse=newest_first)


async def sync_events(
    fetch_page: PageFetcher,
    name: str,
    page_size: int = DEFAULT_PAGE_SIZE,
    concurrency: int = DEFAULT_CONCURRENCY,
    newest_first: bool = False,
    module_hash_blacklist: Iterable[str] = (),
) -> list[dict[str, Any]]:
    """
    Fetch every event matching ``name`` until the stream is exhausted.

    Args:
        fetch_page: Coroutine ``(name, limit, offset) -> list of raw events``
        name: Event name to query
        page_size: Events requested per page
        concurrency: Page requests in flight per round
        newest_first: Sort by descending height instead of ascending
        module_hash_blacklist: Module hashes whose events are dropped

    Returns:
        Raw events, filtered and sorted by height

    Raises:
        ValueError: If ``page_size`` or ``concurrency`` is not positive
        Exception: Whatever ``fetch_page`` raises; no partial result is returned
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if concurrency <= 0:
        raise ValueError(f"concurrency must be positive, got {concurrency}")

    logger.debug(f"starting to get {name} events")
    cursor = SyncCursor()
    while True:
        offsets = plan_round(cursor, page_size, concurrency)
        logger.debug(
            "%s events, doing batch offset=%s limit=%s concurrency=%s",
            name,
            cursor.offset,
            page_size,
            concurrency,
        )
        results = await asyncio.gather(
            *(fetch_page(name, page_size, offset) for offset in offsets),
            return_exceptions=True,
        )
        # Every request in the round settles before a failure is surfaced.
        for result in results:
            if isinstance(result, BaseException):
                raise result
        pages = list(results)
        cursor = advance_cursor(cursor, pages, page_size)
        if not round_is_full(pages, page_size):
            break

    events = finalize_events(cursor.pages, module_hash_blacklist, newest_first)
    logger.info(
        f"Synced {len(events)} {name} events in {cursor.rounds} round(s) "
        f"({cursor.offset // page_size} page requests)"
    )
    return events
