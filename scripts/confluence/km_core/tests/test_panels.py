from __future__ import annotations

import unittest
from pathlib import Path
import sys

from rich.console import Console
from rich.spinner import Spinner
from rich.table import Table

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from km_core.models import PanelData, Space  # noqa: E402
from km_core.panels.global_panel import render as render_global  # noqa: E402
from km_core.panels.spaces import render as render_spaces  # noqa: E402


def plain(renderable) -> str:
    console = Console(width=100, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class GlobalPanelRenderTests(unittest.TestCase):
    def test_links_table(self):
        panel = render_global(
            PanelData(
                key="confluence",
                title="Confluence",
                items=[{"name": "Eng", "href": "https://wiki.example/spaces/ENG"}],
                meta={"links": 1, "login": "https://wiki.example"},
            )
        )
        self.assertEqual(panel.border_style, "cyan")
        self.assertIsInstance(panel.renderable.renderables[-1], Table)
        self.assertIn("Eng", plain(panel))

    def test_warning_shows_login(self):
        panel = render_global(
            PanelData(
                key="confluence",
                title="Confluence",
                status="warn",
                meta={"links": 0, "login": "https://wiki.example"},
                errors=["unauthenticated: HTTP 302"],
            )
        )
        text = plain(panel)
        self.assertEqual(panel.border_style, "yellow")
        self.assertIn("Not logged in to Confluence", text)
        self.assertIn("https://wiki.example", text)

    def test_busy_shows_spinner(self):
        panel = render_global(PanelData(key="confluence", title="Confluence", status="busy"))
        self.assertIsInstance(panel.renderable.renderables[0], Spinner)


class SpacesPanelRenderTests(unittest.TestCase):
    def test_lists_spaces(self):
        text = plain(render_spaces([Space(id="ENG", name="Engineering")], "eng"))
        self.assertIn("ENG", text)
        self.assertIn("Engineering", text)

    def test_empty(self):
        panel = render_spaces([], "zzz")
        self.assertEqual(panel.border_style, "yellow")
        self.assertIn("No matching space", plain(panel))


if __name__ == "__main__":
    unittest.main()
