"""Shared text helpers for markup produced by the service descriptors."""

from __future__ import annotations

import html
import re
import unicodedata
from urllib.parse import quote

# Characters encodeURIComponent leaves alone on top of quote()'s unreserved set.
URI_COMPONENT_SAFE = "!'()*"
DELIMITER_RE = re.compile(r"[\s._\-]+")


def encode_uri_component(value: str | None) -> str:
    return quote(value or "", safe=URI_COMPONENT_SAFE)


def escape(value: object | None) -> str:
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def normalize(value: str | None) -> str:
    """Lower-cased, accent-free form used for loose matching."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()


def full_name(author: dict | None) -> str:
    if not author:
        return ""
    first = (author.get("firstName") or "").strip()
    last = (author.get("lastName") or "").strip()
    name = f"{first} {last}".strip()
    return name or str(author.get("id") or "").strip()


def initials(author: dict | None) -> str:
    name = full_name(author)
    tokens = [t for t in DELIMITER_RE.split(name) if t]
    if not tokens:
        return "??"
    if len(tokens) == 1:
        return tokens[0][:2].upper()
    return (tokens[0][0] + tokens[-1][0]).upper()


def tooltip_text(*parts: str | None) -> str:
    return "<br>".join(p.strip() for p in parts if p and p.strip())
