"""Resolved space links collector (fail-soft)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from km_core.collectors import new_client, read_json
from km_core.models import Failure, FailureReason, FetchOutcome, Success

logger = logging.getLogger(__name__)

UNAUTHENTICATED_STATUSES = {401, 403}


def is_link_payload(payload: Any) -> bool:
    """Check the ``{"spaces": [{"name", "link": [_, {"href"}]}]}`` shape."""
    if not isinstance(payload, dict) or not isinstance(payload.get("spaces"), list):
        return False
    for space in payload["spaces"]:
        if not isinstance(space, dict) or not isinstance(space.get("name"), str):
            return False
        links = space.get("link")
        if not isinstance(links, list) or len(links) < 2:
            return False
        if not isinstance(links[1], dict) or not isinstance(links[1].get("href"), str):
            return False
    return True


class LinkFetcher:
    """Issue one GET against the link endpoint and classify the outcome.

    Redirects are never followed: Confluence answers an anonymous request
    with a redirect to its login page, which must not pass as data.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        cookies: dict[str, str] | None = None,
    ) -> None:
        self._client = client
        self._cookies = cookies

    async def fetch(self, url: str) -> FetchOutcome:
        if self._client is not None:
            return await self._fetch(self._client, url)
        async with new_client(cookies=self._cookies) as client:
            return await self._fetch(client, url)

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> FetchOutcome:
        try:
            response = await client.get(url, follow_redirects=False)
        except httpx.TimeoutException:
            logger.warning("link request timed out: %s", url)
            return Failure(FailureReason.TRANSPORT, "request timed out")
        except httpx.RequestError as exc:
            logger.warning("link request failed: %s (%s)", url, exc)
            return Failure(FailureReason.TRANSPORT, str(exc) or type(exc).__name__)

        status = response.status_code
        if response.is_redirect or status in UNAUTHENTICATED_STATUSES:
            location = response.headers.get("location", "")
            logger.debug("no session for %s (status=%s location=%s)", url, status, location)
            return Failure(FailureReason.UNAUTHENTICATED, f"HTTP {status}")
        if not response.is_success:
            return Failure(FailureReason.TRANSPORT, f"HTTP {status}")

        payload = read_json(response)
        if not is_link_payload(payload):
            logger.warning("unexpected link payload from %s", url)
            return Failure(FailureReason.MALFORMED, "unexpected response body")
        return Success(payload)
