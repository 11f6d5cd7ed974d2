"""Asynchronous refresh cycle of a mounted link panel."""

from __future__ import annotations

import logging
from typing import Protocol

from km_core.models import Configuration, Failure, FailureReason, FetchOutcome, Success
from km_core.panels import links as link_list
from km_core.view import ViewContext, busy

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    async def fetch(self, url: str) -> FetchOutcome: ...


class RefreshController:
    """Runs one busy -> fetch -> render-or-warn -> clear-busy cycle per call.

    Failures of any kind end up on the view's warning banner; nothing is
    raised to the caller and nothing is retried. Each call bumps the view's
    generation so a slower, older cycle cannot write over a newer one.
    """

    def __init__(self, fetcher: Fetcher, base_url_key: str) -> None:
        self.fetcher = fetcher
        self.base_url_key = base_url_key

    def url_for(self, configuration: Configuration) -> str:
        base_url = configuration.node.parameters[self.base_url_key]
        return base_url + "/" + configuration.parameters["query"]

    async def refresh(self, view: ViewContext, configuration: Configuration) -> None:
        view.hide_warning()
        region = view.links
        region.reveal()
        region.clear()
        generation = view.begin_cycle()

        with busy(view.indicator, region):
            try:
                outcome = await self.fetcher.fetch(self.url_for(configuration))
            except Exception as exc:
                logger.warning("link refresh failed: %s", exc, exc_info=True)
                outcome = Failure(FailureReason.TRANSPORT, str(exc))

            if not view.is_current(generation):
                logger.debug("dropping stale refresh cycle %s", generation)
                return

            if isinstance(outcome, Success):
                try:
                    entries = link_list.to_entries(outcome.payload)
                    items = [link_list.render_entry(entry) for entry in entries]
                except Exception as exc:
                    logger.warning("unrenderable link payload: %s", exc)
                    outcome = Failure(FailureReason.MALFORMED, str(exc))
                else:
                    region.append(entries, items)
                    logger.debug("rendered %d links", len(entries))
                    return

            if not isinstance(outcome, Failure):
                logger.warning("unexpected fetch outcome: %r", outcome)
                outcome = Failure(FailureReason.MALFORMED, "unexpected fetch outcome")

            detail = outcome.reason.value
            if outcome.detail:
                detail = f"{detail}: {outcome.detail}"
            view.show_warning(detail)
