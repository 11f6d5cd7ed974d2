"""Subscription status enrichment: space details and its last activity."""

from __future__ import annotations

import base64
import logging
import re
from typing import Any
from urllib.parse import urlsplit

import httpx

from km_core.collectors import join_url, read_json
from km_core.descriptors.confluence import PARAMETER_SPACE, PARAMETER_URL
from km_core.formatting import encode_uri_component
from km_core.models import Space, SpaceActivity

logger = logging.getLogger(__name__)

# Groups: avatar src, username, display name, page href, page title, moment.
ACTIVITY_PATTERN = re.compile(
    r'logo"\s*src="([^"]+)".*data-username="([^"]+)"[^>]+>([^<]+)<'
    r'.*href="([^"]+)"[^>]*>([^<]+)<.*update-item-date">([^<]+)<',
    re.DOTALL,
)
DEFAULT_AVATAR_SUFFIX = "/default.png"


class SpaceNotFoundError(LookupError):
    """The configured space key does not resolve on the remote wiki."""


def host_url(base_url: str) -> str:
    parts = urlsplit(base_url)
    return f"{parts.scheme}://{parts.netloc}"


def parse_activity(markup: str | None, host: str) -> tuple[SpaceActivity, str] | None:
    """Last activity from the recently-updated feed, plus the avatar URL."""
    match = ACTIVITY_PATTERN.search(markup or "")
    if match is None:
        return None
    avatar, username, display_name, page_url, page, moment = (g.strip() for g in match.groups())
    activity = SpaceActivity(
        moment=moment,
        author={"id": username, "firstName": display_name},
        page=page,
        page_url=host + page_url,
    )
    return activity, host + avatar


async def fetch_avatar(client: httpx.AsyncClient, avatar_url: str) -> str | None:
    if avatar_url.endswith(DEFAULT_AVATAR_SUFFIX):
        return None
    try:
        response = await client.get(avatar_url)
    except httpx.RequestError as exc:
        logger.debug("avatar unavailable: %s (%s)", avatar_url, exc)
        return None
    if response.status_code != 200:
        return None
    return "data:image/png;base64," + base64.b64encode(response.content).decode("ascii")


async def collect_space(client: httpx.AsyncClient, parameters: dict[str, str]) -> Space:
    base_url = parameters[PARAMETER_URL].rstrip("/")
    key = parameters.get(PARAMETER_SPACE) or "0"

    try:
        details_response = await client.get(join_url(base_url, "rest/api/space/" + encode_uri_component(key)))
    except httpx.RequestError as exc:
        logger.warning("space details unavailable for %s (%s)", key, exc)
        raise SpaceNotFoundError(key) from exc
    details: Any = read_json(details_response) if details_response.is_success else None
    if not isinstance(details, dict):
        raise SpaceNotFoundError(key)

    space = Space(id=str(details.get("key") or key), name=str(details.get("name") or ""))

    feed_url = join_url(
        base_url,
        "plugins/recently-updated/changes.action?theme=social&pageSize=1&spaceKeys=" + encode_uri_component(key),
    )
    try:
        history = await client.get(feed_url)
    except httpx.RequestError as exc:
        logger.debug("activity feed unavailable for %s (%s)", key, exc)
        return space
    parsed = parse_activity(history.text if history.is_success else None, host_url(base_url))
    if parsed is not None:
        activity, avatar_url = parsed
        activity.author_avatar = await fetch_avatar(client, avatar_url)
        space.activity = activity
    return space


def subscription_data(space: Space) -> dict[str, Any]:
    return {"space": space.to_dict()}
