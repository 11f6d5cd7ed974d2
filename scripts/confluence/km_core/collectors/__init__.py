"""Collector helpers and package exports."""

from __future__ import annotations

import json
from typing import Any

import httpx

JSON_HEADERS = {
    "Content-Type": "application/json; charset=utf-8",
    "Accept": "application/json",
    # Skips the XSRF check on Confluence behind an SSO proxy.
    "X-Atlassian-Token": "nocheck",
}


def join_url(base_url: str, resource: str) -> str:
    return base_url.rstrip("/") + "/" + resource.lstrip("/")


def read_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def new_client(cookies: dict[str, str] | None = None, **kwargs: Any) -> httpx.AsyncClient:
    """Client carrying only the ambient session cookies."""
    return httpx.AsyncClient(
        headers=JSON_HEADERS,
        cookies=cookies,
        follow_redirects=False,
        **kwargs,
    )
