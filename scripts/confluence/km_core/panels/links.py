"""Resolved link list renderer.

Each space record carries a list of link relations; index 1 is the one the
remote service documents as the browsable space home. If the remote schema
ever reorders that list, this offset is where it breaks.
"""

from __future__ import annotations

from typing import Any

from km_core.formatting import escape
from km_core.models import LinkEntry

HREF_INDEX = 1


def to_entries(payload: dict[str, Any]) -> list[LinkEntry]:
    return [
        LinkEntry(name=space["name"], href=space["link"][HREF_INDEX]["href"], order=order)
        for order, space in enumerate(payload.get("spaces") or [])
    ]


def render_entry(entry: LinkEntry) -> str:
    return (
        f'<li><a target="_blank" rel="noopener" href="{escape(entry.href)}">'
        f'<i class="fas fa-chevron-right"></i>{escape(entry.name)}</a></li>'
    )


def render(payload: dict[str, Any]) -> list[str]:
    return [render_entry(entry) for entry in to_entries(payload)]
