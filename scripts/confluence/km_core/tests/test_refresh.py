from __future__ import annotations

import asyncio
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from km_core.models import Configuration, Failure, FailureReason, Node, Success  # noqa: E402
from km_core.refresh import RefreshController  # noqa: E402
from km_core.view import ViewContext  # noqa: E402

URL_KEY = "service:km:confluence:url"


def configuration(base_url: str = "https://wiki.example", query: str = "rest/links") -> Configuration:
    return Configuration(node=Node(id="service:km:confluence", parameters={URL_KEY: base_url}), parameters={"query": query})


def payload(*names: str) -> dict:
    return {"spaces": [{"name": n, "link": [{}, {"href": f"https://wiki.example/spaces/{n}"}]} for n in names]}


class RecordingIndicator:
    def __init__(self):
        self.shown = 0
        self.hidden = 0

    def show_busy(self, region):
        self.shown += 1

    def hide_busy(self, region):
        self.hidden += 1


class StaticFetcher:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.urls: list[str] = []

    async def fetch(self, url):
        self.urls.append(url)
        return self.outcomes.pop(0)


class RaisingFetcher:
    async def fetch(self, url):
        raise RuntimeError("socket closed")


class SyncRaisingFetcher:
    def fetch(self, url):
        raise RuntimeError("bad url")


class RefreshControllerTests(unittest.IsolatedAsyncioTestCase):
    def view(self) -> tuple[ViewContext, RecordingIndicator]:
        indicator = RecordingIndicator()
        return ViewContext(indicator=indicator), indicator

    async def test_success_renders_links_and_clears_busy(self):
        fetcher = StaticFetcher(Success(payload("Eng")))
        view, indicator = self.view()
        await RefreshController(fetcher, URL_KEY).refresh(view, configuration())

        self.assertEqual(fetcher.urls, ["https://wiki.example/rest/links"])
        self.assertEqual([(e.name, e.href) for e in view.links.entries], [("Eng", "https://wiki.example/spaces/Eng")])
        self.assertEqual(len(view.links.items), 1)
        self.assertTrue(view.warning_hidden)
        self.assertFalse(view.links.hidden)
        self.assertEqual((indicator.shown, indicator.hidden), (1, 1))

    async def test_failure_shows_warning_and_leaves_list_empty(self):
        view, indicator = self.view()
        fetcher = StaticFetcher(Failure(FailureReason.UNAUTHENTICATED, "HTTP 302"))
        await RefreshController(fetcher, URL_KEY).refresh(view, configuration())

        self.assertFalse(view.warning_hidden)
        self.assertEqual(view.links.items, [])
        self.assertIn("unauthenticated", view.warning_detail)
        self.assertEqual((indicator.shown, indicator.hidden), (1, 1))

    async def test_rejected_fetch_is_absorbed(self):
        view, indicator = self.view()
        await RefreshController(RaisingFetcher(), URL_KEY).refresh(view, configuration())

        self.assertFalse(view.warning_hidden)
        self.assertEqual(view.links.entries, [])
        self.assertEqual((indicator.shown, indicator.hidden), (1, 1))

    async def test_synchronous_raise_still_clears_busy(self):
        view, indicator = self.view()
        await RefreshController(SyncRaisingFetcher(), URL_KEY).refresh(view, configuration())

        self.assertFalse(view.warning_hidden)
        self.assertEqual((indicator.shown, indicator.hidden), (1, 1))

    async def test_missing_base_url_goes_to_warning(self):
        view, indicator = self.view()
        config = Configuration(node=Node(id="service:km:confluence"), parameters={"query": "rest/links"})
        await RefreshController(StaticFetcher(), URL_KEY).refresh(view, config)

        self.assertFalse(view.warning_hidden)
        self.assertEqual((indicator.shown, indicator.hidden), (1, 1))

    async def test_empty_payload_leaves_clean_empty_list(self):
        view, indicator = self.view()
        await RefreshController(StaticFetcher(Success({"spaces": []})), URL_KEY).refresh(view, configuration())

        self.assertEqual(view.links.items, [])
        self.assertTrue(view.warning_hidden)
        self.assertEqual(indicator.shown, indicator.hidden)

    async def test_consecutive_refreshes_replace_list(self):
        view, _ = self.view()
        controller = RefreshController(StaticFetcher(Success(payload("A1", "A2")), Success(payload("B1"))), URL_KEY)
        await controller.refresh(view, configuration())
        await controller.refresh(view, configuration())

        self.assertEqual([e.name for e in view.links.entries], ["B1"])
        self.assertEqual(len(view.links.items), 1)

    async def test_success_after_failure_hides_warning(self):
        view, _ = self.view()
        controller = RefreshController(StaticFetcher(Failure(FailureReason.TRANSPORT), Success(payload("Eng"))), URL_KEY)
        await controller.refresh(view, configuration())
        self.assertFalse(view.warning_hidden)

        await controller.refresh(view, configuration())
        self.assertTrue(view.warning_hidden)
        self.assertEqual([e.name for e in view.links.entries], ["Eng"])

    async def test_stale_cycle_is_discarded(self):
        release_first = asyncio.Event()

        class GatedFetcher:
            calls = 0

            async def fetch(self, url):
                GatedFetcher.calls += 1
                if GatedFetcher.calls == 1:
                    await release_first.wait()
                    return Success(payload("Old"))
                return Success(payload("New"))

        view, indicator = self.view()
        controller = RefreshController(GatedFetcher(), URL_KEY)
        first = asyncio.create_task(controller.refresh(view, configuration()))
        await asyncio.sleep(0)
        await controller.refresh(view, configuration())
        release_first.set()
        await first

        self.assertEqual([e.name for e in view.links.entries], ["New"])
        self.assertEqual((indicator.shown, indicator.hidden), (2, 2))

    async def test_stale_failure_does_not_raise_warning(self):
        release_first = asyncio.Event()

        class GatedFetcher:
            calls = 0

            async def fetch(self, url):
                GatedFetcher.calls += 1
                if GatedFetcher.calls == 1:
                    await release_first.wait()
                    return Failure(FailureReason.TRANSPORT)
                return Success(payload("New"))

        view, _ = self.view()
        controller = RefreshController(GatedFetcher(), URL_KEY)
        first = asyncio.create_task(controller.refresh(view, configuration()))
        await asyncio.sleep(0)
        await controller.refresh(view, configuration())
        release_first.set()
        await first

        self.assertTrue(view.warning_hidden)
        self.assertEqual([e.name for e in view.links.entries], ["New"])

    async def test_default_spinner_released(self):
        view = ViewContext()
        await RefreshController(RaisingFetcher(), URL_KEY).refresh(view, configuration())
        self.assertFalse(view.is_busy)
        self.assertEqual(view.snapshot().status, "warn")

    async def test_non_object_payload_goes_to_warning(self):
        view, indicator = self.view()
        fetcher = StaticFetcher(Success(["not", "a", "dict"]))
        await RefreshController(fetcher, URL_KEY).refresh(view, configuration())

        self.assertFalse(view.warning_hidden)
        self.assertIn("malformed", view.warning_detail)
        self.assertEqual(view.links.items, [])
        self.assertEqual((indicator.shown, indicator.hidden), (1, 1))

    async def test_unknown_outcome_goes_to_warning(self):
        view, indicator = self.view()
        await RefreshController(StaticFetcher({"spaces": []}), URL_KEY).refresh(view, configuration())

        self.assertFalse(view.warning_hidden)
        self.assertIn("malformed", view.warning_detail)
        self.assertEqual((indicator.shown, indicator.hidden), (1, 1))


if __name__ == "__main__":
    unittest.main()
