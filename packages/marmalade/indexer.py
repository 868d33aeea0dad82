"""Client for the chainweb-data event indexer (``/txs/events``)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .http_client import HttpClient

logger = logging.getLogger(__name__)

DEFAULT_EVENT_HOST = "testnetqueries.kadena.network"
EVENTS_PATH = "/txs/events"
MAX_BODY_SNIPPET = 800


class IndexerRequestError(Exception):
    """Raised when an event page request does not succeed.

    ``body`` holds the raw response text; error bodies are never parsed.
    """

    def __init__(self, url: str, status: int, body: str):
        snippet = body[:MAX_BODY_SNIPPET]
        super().__init__(f"GET {url} -> {status}: {snippet}")
        self.url = url
        self.status = status
        self.body = body


class IndexerClient:
    """Fetches pages of raw events by name from an indexer host."""

    def __init__(
        self,
        host: str = DEFAULT_EVENT_HOST,
        scheme: str = "https",
        timeout: float = 20.0,
        max_retries: int = 0,
    ):
        self.host = host
        self.client = HttpClient(
            base_url=f"{scheme}://{host}",
            timeout=timeout,
            max_retries=max_retries,
        )

    def events_url(self) -> str:
        return self.client.url_for(EVENTS_PATH)

    def fetch_events_page(self, name: str, limit: int, offset: int) -> list[dict[str, Any]]:
        """
        Fetch one page of raw events.

        Args:
            name: Event name (or qualified prefix) to query
            limit: Page size
            offset: Absolute offset into the event stream

        Returns:
            List of raw event dicts, at most ``limit`` long

        Raises:
            IndexerRequestError: On a non-success status or a non-list body
        """
        logger.debug("fetching %s events limit=%s offset=%s", name, limit, offset)
        response = self.client.get(
            EVENTS_PATH,
            params={"name": name, "limit": limit, "offset": offset},
        )
        if not response.ok:
            raise IndexerRequestError(self.events_url(), response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError:
            raise IndexerRequestError(
                self.events_url(), response.status_code, response.text
            ) from None
        if not isinstance(payload, list):
            raise IndexerRequestError(
                self.events_url(),
                response.status_code,
                f"expected a JSON array of events, got {type(payload).__name__}",
            )
        return payload

    async def afetch_events_page(self, name: str, limit: int, offset: int) -> list[dict[str, Any]]:
        """Run :meth:`fetch_events_page` in a worker thread."""
        return await asyncio.to_thread(self.fetch_events_page, name, limit, offset)
