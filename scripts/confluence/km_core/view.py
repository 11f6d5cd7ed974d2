"""Mounted rendering surfaces: host menu, per-view regions and busy state."""

from __future__ import annotations

import itertools
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Protocol

from km_core.models import Configuration, LinkEntry, PanelData, Subscription

_REGION_IDS = itertools.count(1)


@dataclass
class LinkRegion:
    hidden: bool = False
    items: list[str] = field(default_factory=list)
    entries: list[LinkEntry] = field(default_factory=list)
    id: int = field(default_factory=lambda: next(_REGION_IDS))

    def reveal(self) -> None:
        self.hidden = False

    def clear(self) -> None:
        self.items.clear()
        self.entries.clear()

    def append(self, entries: list[LinkEntry], items: list[str]) -> None:
        self.entries.extend(entries)
        self.items.extend(items)


class BusyIndicator(Protocol):
    def show_busy(self, region: LinkRegion) -> None: ...

    def hide_busy(self, region: LinkRegion) -> None: ...


class SpinIndicator:
    """Counts outstanding busy holds per region."""

    def __init__(self) -> None:
        self._holds: dict[int, int] = {}

    def show_busy(self, region: LinkRegion) -> None:
        self._holds[region.id] = self._holds.get(region.id, 0) + 1

    def hide_busy(self, region: LinkRegion) -> None:
        remaining = self._holds.get(region.id, 0) - 1
        if remaining > 0:
            self._holds[region.id] = remaining
        else:
            self._holds.pop(region.id, None)

    def is_busy(self, region: LinkRegion) -> bool:
        return self._holds.get(region.id, 0) > 0


@contextmanager
def busy(indicator: BusyIndicator, region: LinkRegion) -> Iterator[None]:
    indicator.show_busy(region)
    try:
        yield
    finally:
        indicator.hide_busy(region)


RefreshHandler = Callable[[], Awaitable[None]]


class ViewContext:
    """A mounted panel bound to one subscription/configuration pair."""

    def __init__(
        self,
        subscription: Subscription | None = None,
        configuration: Configuration | None = None,
        indicator: BusyIndicator | None = None,
    ) -> None:
        self.subscription = subscription
        self.configuration = configuration
        self.indicator = indicator if indicator is not None else SpinIndicator()
        self.links = LinkRegion()
        self.warning_hidden = True
        self.warning_detail = ""
        self.login_href: str | None = None
        self.icons: list[str] = []
        self._refresh_handler: RefreshHandler | None = None
        self._generation = 0

    def reset(self) -> None:
        self.links = LinkRegion()
        self.warning_hidden = True
        self.warning_detail = ""
        self.login_href = None
        self.icons = []
        self._refresh_handler = None

    def hide_warning(self) -> None:
        self.warning_hidden = True
        self.warning_detail = ""

    def show_warning(self, detail: str = "") -> None:
        self.warning_hidden = False
        self.warning_detail = detail

    def prepend_icon(self, markup: str) -> None:
        self.icons.insert(0, markup)

    def begin_cycle(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def on_refresh(self, handler: RefreshHandler) -> None:
        self._refresh_handler = handler

    async def click_refresh(self) -> None:
        if self._refresh_handler is None:
            return
        await self._refresh_handler()

    @property
    def is_busy(self) -> bool:
        checker = getattr(self.indicator, "is_busy", None)
        return bool(checker and checker(self.links))

    def snapshot(self, key: str = "confluence", title: str = "Confluence") -> PanelData:
        if self.is_busy:
            status = "busy"
        elif not self.warning_hidden:
            status = "warn"
        else:
            status = "ok"
        return PanelData(
            key=key,
            title=title,
            status=status,
            items=[{"name": e.name, "href": e.href} for e in self.links.entries],
            meta={"login": self.login_href, "links": len(self.links.entries)},
            errors=[] if self.warning_hidden else [self.warning_detail or "not logged in"],
        )


@dataclass
class MenuEntry:
    panel_id: str
    nav_icon: str
    view: ViewContext


class GlobalHost:
    """Extra menu of the dashboard; global panels are keyed by a fixed id."""

    def __init__(self) -> None:
        self.entries: list[MenuEntry] = []

    def remove(self, panel_id: str) -> None:
        self.entries = [e for e in self.entries if e.panel_id != panel_id]

    def mount(self, panel_id: str, nav_icon: str, view: ViewContext) -> None:
        self.remove(panel_id)
        self.entries.append(MenuEntry(panel_id=panel_id, nav_icon=nav_icon, view=view))

    def find(self, panel_id: str) -> ViewContext | None:
        return next((e.view for e in self.entries if e.panel_id == panel_id), None)
