"""Command line entrypoint for the Confluence global panel."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone

from rich.console import Console
from rich.live import Live

from km_core.collectors import new_client
from km_core.collectors.links import LinkFetcher
from km_core.collectors.spaces import find_all_by_name
from km_core.collectors.version import ConfluenceUnreachableError, validate_access
from km_core.descriptors.confluence import PARAMETER_URL, ConfluenceDescriptor
from km_core.panels.global_panel import render as render_global_panel
from km_core.panels.spaces import render as render_spaces
from km_core.refresh import RefreshController
from km_core.settings import resolve_settings, to_configuration
from km_core.view import ViewContext

logger = logging.getLogger(__name__)


def _json_output(view: ViewContext) -> str:
    payload = {
        "collected_at": datetime.now(timezone.utc).isoformat(),
        "panel": view.snapshot().to_dict(),
    }
    return json.dumps(payload, indent=2)


async def _run_panel(settings: dict, console: Console, live: bool, as_json: bool) -> int:
    configuration = to_configuration(settings)
    async with new_client(cookies=settings["cookies"]) as client:
        controller = RefreshController(LinkFetcher(client), PARAMETER_URL)
        descriptor = ConfluenceDescriptor(controller=controller)
        view = ViewContext(configuration=configuration)
        await descriptor.render_global(view, configuration)

        if as_json:
            print(_json_output(view))
            return 0

        if not live:
            console.print(render_global_panel(view.snapshot()))
            return 0

        with Live(render_global_panel(view.snapshot()), console=console, refresh_per_second=4) as screen:
            while True:
                await asyncio.sleep(settings["refresh_seconds"])
                cycle = asyncio.create_task(view.click_refresh())
                while not cycle.done():
                    screen.update(render_global_panel(view.snapshot()))
                    await asyncio.sleep(0.25)
                await cycle
                screen.update(render_global_panel(view.snapshot()))


async def _run_search(settings: dict, console: Console, criteria: str) -> int:
    async with new_client(cookies=settings["cookies"]) as client:
        spaces = await find_all_by_name(client, settings["url"], criteria)
    console.print(render_spaces(spaces, criteria))
    return 0


async def _run_check(settings: dict, console: Console) -> int:
    async with new_client(cookies=settings["cookies"]) as client:
        try:
            version = await validate_access(client, settings["url"])
        except ConfluenceUnreachableError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
    console.print(f"Confluence [bold]{version}[/bold] at {settings['url']}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Confluence global panel")
    parser.add_argument("-l", "--live", action="store_true", help="Keep refreshing the panel")
    parser.add_argument("--json", action="store_true", help="Emit JSON payload")
    parser.add_argument("--config", help="Optional JSON config file")
    parser.add_argument("--url", help="Confluence base URL override")
    parser.add_argument("--query", help="Link endpoint, relative to the base URL")
    parser.add_argument("--refresh", type=int, help="Refresh interval seconds override")
    parser.add_argument("--search", metavar="CRITERIA", help="List spaces matching the criteria and exit")
    parser.add_argument("--check", action="store_true", help="Print the remote Confluence version and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = resolve_settings(args.config, base_url=args.url, query=args.query, refresh_seconds=args.refresh)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    logger.debug("panel settings resolved for %s", settings["url"])
    console = Console()
    try:
        if args.check:
            return asyncio.run(_run_check(settings, console))
        if args.search is not None:
            return asyncio.run(_run_search(settings, console, args.search))
        return asyncio.run(_run_panel(settings, console, args.live, args.json))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
