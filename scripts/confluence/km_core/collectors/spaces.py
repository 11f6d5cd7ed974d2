"""Space suggestions for the subscription editor's typed select."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from km_core.collectors import join_url, read_json
from km_core.formatting import normalize
from km_core.models import Space

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
MAX_RESULTS = 10
EMPTY_PAGE: dict[str, Any] = {"results": [], "_links": {}}


async def _fetch_page(client: httpx.AsyncClient, base_url: str, start: int) -> dict[str, Any]:
    url = join_url(base_url, f"rest/api/space?type=global&limit={PAGE_SIZE}&start={start}")
    try:
        response = await client.get(url)
    except httpx.RequestError as exc:
        logger.warning("space search request failed: %s (%s)", url, exc)
        return EMPTY_PAGE
    if not response.is_success:
        logger.debug("space search got HTTP %s from %s", response.status_code, url)
        return EMPTY_PAGE
    page = read_json(response)
    return page if isinstance(page, dict) else EMPTY_PAGE


def _matches(space: Space, criteria: str) -> bool:
    return criteria in normalize(space.name) or criteria in normalize(space.id)


async def find_all_by_name(client: httpx.AsyncClient, base_url: str, criteria: str) -> list[Space]:
    """Spaces whose key or name contains ``criteria``, at most ten, in remote order."""
    wanted = normalize(criteria)
    result: list[Space] = []
    start = 0
    while len(result) < MAX_RESULTS:
        page = await _fetch_page(client, base_url, start)
        for raw in page.get("results") or []:
            space = Space(id=str(raw.get("key") or ""), name=str(raw.get("name") or ""))
            if _matches(space, wanted):
                result.append(space)
        if "next" not in (page.get("_links") or {}):
            break
        start += PAGE_SIZE
    return result[:MAX_RESULTS]
