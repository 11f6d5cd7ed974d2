"""Remote Confluence version, read from a public page (fail-soft)."""

from __future__ import annotations

import logging
import re

import httpx

from km_core.collectors import join_url

logger = logging.getLogger(__name__)

VERSION_PAGE = "forgotuserpassword.action"
VERSION_META = re.compile(r'ajs-version-number"\s+content="([^"]*)"')


class ConfluenceUnreachableError(ValueError):
    """No Confluence answers at the configured base URL."""

    def __init__(self, base_url: str) -> None:
        super().__init__(f"no Confluence server at {base_url}")
        self.base_url = base_url


def parse_version(markup: str | None) -> str | None:
    match = VERSION_META.search(markup or "")
    if match is None:
        return None
    return match.group(1).strip() or None


async def get_version(client: httpx.AsyncClient, base_url: str) -> str | None:
    url = join_url(base_url, VERSION_PAGE)
    try:
        response = await client.get(url)
    except httpx.RequestError as exc:
        logger.warning("version request failed: %s (%s)", url, exc)
        return None
    if not response.is_success:
        logger.debug("version page got HTTP %s from %s", response.status_code, url)
        return None
    return parse_version(response.text)


async def validate_access(client: httpx.AsyncClient, base_url: str) -> str:
    version = await get_version(client, base_url)
    if version is None:
        raise ConfluenceUnreachableError(base_url)
    return version
