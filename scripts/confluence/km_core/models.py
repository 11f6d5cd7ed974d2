"""Shared model contracts for the Confluence service panel."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass
class Subscription:
    parameters: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] | None = None


@dataclass
class Node:
    id: str
    parameters: dict[str, str] = field(default_factory=dict)


@dataclass
class ParameterSelector:
    """Typed select registered for one subscription parameter."""

    parameter: str
    endpoint: str
    node: str


@dataclass
class Configuration:
    node: Node
    parameters: dict[str, str] = field(default_factory=dict)
    selectors: dict[str, ParameterSelector] = field(default_factory=dict)


class FailureReason(str, Enum):
    TRANSPORT = "transport"
    MALFORMED = "malformed"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Success:
    payload: dict[str, Any]


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    detail: str = ""


FetchOutcome = Success | Failure


@dataclass(frozen=True)
class LinkEntry:
    name: str
    href: str
    order: int


@dataclass
class SpaceActivity:
    moment: str | None = None
    author: dict[str, str] = field(default_factory=dict)
    author_avatar: str | None = None
    page: str | None = None
    page_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "moment": self.moment,
            "author": dict(self.author),
            "authorAvatar": self.author_avatar,
            "page": self.page,
            "pageUrl": self.page_url,
        }


@dataclass
class Space:
    id: str
    name: str
    activity: SpaceActivity | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "activity": self.activity.to_dict() if self.activity else None,
        }


@dataclass
class PanelData:
    key: str
    title: str
    status: str = "ok"
    items: list[dict[str, Any]] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "status": self.status,
            "items": self.items,
            "meta": self.meta,
            "errors": self.errors,
        }
