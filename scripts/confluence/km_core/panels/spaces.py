"""Space suggestions renderer."""

from __future__ import annotations

from rich.table import Table

from km_core.models import Space
from km_core.panels import panel_from_table


def render(spaces: list[Space], criteria: str):
    table = Table(box=None, expand=True)
    table.add_column("Key", no_wrap=True, style="bold")
    table.add_column("Name", overflow="fold")

    if not spaces:
        table.add_row("-", "No matching space")
    else:
        for space in spaces:
            table.add_row(space.id, space.name)

    status = "ok" if spaces else "warn"
    return panel_from_table(f"Spaces matching '{criteria}'", status, table)
