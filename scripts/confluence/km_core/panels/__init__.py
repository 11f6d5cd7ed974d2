"""Panel rendering helpers."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from km_core.models import PanelData

STATUS_BORDER = {
    "ok": "cyan",
    "busy": "blue",
    "warn": "yellow",
    "error": "red",
}


def border_for(status: str) -> str:
    return STATUS_BORDER.get(status, "cyan")


def panel_from_table(title: str, status: str, table: Table) -> Panel:
    return Panel(table, title=f"[bold]{title}[/bold]", border_style=border_for(status))


def link_text(label: str, href: str | None) -> Text:
    if not href:
        return Text(label)
    return Text(label, style=f"link {href}")


def error_suffix(data: PanelData) -> str:
    if not data.errors:
        return ""
    return f" ({'; '.join(data.errors[:1])})"
