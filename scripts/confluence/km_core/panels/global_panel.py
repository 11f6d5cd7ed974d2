"""Confluence global panel renderer."""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from km_core.models import PanelData
from km_core.panels import border_for, error_suffix, link_text


def render(data: PanelData) -> Panel:
    table = Table(box=None, expand=True, show_header=False)
    table.add_column("", no_wrap=True, width=2)
    table.add_column("Space", overflow="fold")

    for item in data.items:
        table.add_row(">", link_text(str(item.get("name", "")), item.get("href")))

    parts: list = []
    if data.status == "busy":
        parts.append(Spinner("dots", text="Loading spaces..."))
    elif data.status == "warn":
        login = data.meta.get("login")
        parts.append(Text(f"Not logged in to Confluence{error_suffix(data)}", style="yellow"))
        if login:
            parts.append(link_text(f"Log in: {login}", login))
    elif not data.items:
        parts.append(Text("No spaces", style="dim"))

    if data.items:
        parts.append(table)

    title = f"{data.title} ({data.meta.get('links', len(data.items))})"
    return Panel(Group(*parts), title=f"[bold]{title}[/bold]", border_style=border_for(data.status))
