"""Link-header pagination for the GitLab REST API."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger("groupwatch.gitlab.pagination")

# GitLab caps per_page at 100
MAX_PER_PAGE = 100

# Log a warning every this many pages of a single listing
PAGE_WARNING_INTERVAL = 50

_PAGE_PARAM = re.compile(r"[?&]page=(\d+)")


@dataclass
class Page:
    """One page of a paginated listing."""

    items: list[Any] = field(default_factory=list)
    next_page: int | None = None


PageFetcher = Callable[[str, dict[str, Any]], Awaitable[Page]]


def parse_next_page(link_header: str | None) -> int | None:
    """Extract the page number of the ``rel="next"`` entry of a link header.

    Args:
        link_header: Raw value of the ``link`` response header.

    Returns:
        The next page number, or None when there is no next page.
    """
    if not link_header:
        return None

    next_link = next(
        (link for link in link_header.split(",") if 'rel="next"' in link),
        None,
    )
    if next_link is None:
        return None

    match = _PAGE_PARAM.search(next_link)
    return int(match.group(1)) if match else None


async def fetch_all(
    fetch_page: PageFetcher,
    endpoint: str,
    params: dict[str, Any] | None = None,
) -> list[Any]:
    """Fetch every page of a listing and concatenate the results in page order.

    ``params`` are sent unchanged with every request; only ``page`` varies.
    Any failing page request propagates and no partial result is returned.

    Args:
        fetch_page: Coroutine fetching a single page of ``endpoint``.
        endpoint: API endpoint path, e.g. ``/groups/1/subgroups``.
        params: Fixed query parameters.

    Returns:
        All items from all pages.
    """
    base_params = dict(params or {})
    base_params["per_page"] = min(int(base_params.get("per_page", MAX_PER_PAGE)), MAX_PER_PAGE)

    items: list[Any] = []
    page_number = 1
    pages_fetched = 0
    while True:
        page = await fetch_page(endpoint, {**base_params, "page": page_number})
        items.extend(page.items)
        pages_fetched += 1

        if pages_fetched % PAGE_WARNING_INTERVAL == 0:
            logger.warning(
                "Listing %s still paginating after %d pages (%d items)",
                endpoint,
                pages_fetched,
                len(items),
            )

        if page.next_page is None:
            break
        if page.next_page <= page_number:
            logger.warning(
                "Listing %s returned non-advancing next page %d after page %d; stopping",
                endpoint,
                page.next_page,
                page_number,
            )
            break
        page_number = page.next_page

    logger.debug("Fetched %d item(s) from %s in %d page(s)", len(items), endpoint, pages_fetched)
    return items
