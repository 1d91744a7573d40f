"""Query Engine — paginated, filtered, sorted reads over any Collection.

Invariants:
    - find() and count() are issued concurrently and jointly awaited (fan-out, join)
    - If either read raises, the other is cancelled and the exception propagates
      unchanged; no partial result
    - total_items > 0 and page > total_pages -> Failure(404) with no data
    - total_items == 0 -> Success with empty items for every page >= 1
    - len(items) <= limit

Design Decisions:
    - Returns ServiceResult instead of raising for the page-out-of-range case:
      it is an expected outcome resolved locally; storage errors are not
    - No retries and no caching: retry policy belongs to the collection
"""

import asyncio
import logging
from typing import TypeVar

from catalog_api.core.query_spec import PaginatedResult, QueryOptions, total_pages_for
from catalog_api.core.repository_protocols import Collection
from catalog_api.core.responses import ServiceResult, failure_response, success_response

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def paginate(
    collection: Collection[T], options: QueryOptions,
) -> ServiceResult[PaginatedResult[T]]:
    """Run one paginated read and compose the page."""
    reads = (
        asyncio.ensure_future(collection.find(
            options.filter,
            options.sort,
            options.skip,
            options.limit,
            populate=options.populate,
            select=options.select,
        )),
        asyncio.ensure_future(collection.count(options.filter)),
    )
    try:
        items, total_items = await asyncio.gather(*reads)
    except BaseException:
        for read in reads:
            read.cancel()
        raise
    total_pages = total_pages_for(total_items, options.limit)
    logger.debug(
        "Paginated read",
        extra={
            "collection": getattr(collection, "name", type(collection).__name__),
            "page": options.page,
            "limit": options.limit,
            "total_items": total_items,
        },
    )

    if total_items > 0 and options.page > total_pages:
        return failure_response(
            404,
            f"page {options.page} not found, total pages available: {total_pages}",
        )

    return success_response(PaginatedResult(
        items=list(items)[:options.limit],
        total_items=total_items,
        current_page=options.page,
        limit=options.limit,
    ))
