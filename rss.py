"""RSS feed fetcher.

Supplies raw items to the pipeline. A source that times out, answers with an
error status or cannot be parsed yields a FeedBatch with `error` set instead
of raising.
"""
import asyncio
from datetime import datetime
from typing import List, Optional
import httpx
import feedparser
from tenacity import (
    AsyncRetrying, RetryError, retry_if_exception_type,
    stop_after_attempt, wait_exponential,
)

from config_loader import FeedSource
from logging_setup import get_logger
from models import FeedBatch, RawFeedItem

logger = get_logger("sources.rss")


USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/120.0.0.0 Safari/537.36"

REQUEST_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept-Language": "id-ID,id;q=0.9,en-US;q=0.8,en;q=0.7",
    "Accept": "application/rss+xml, application/xml, text/xml, */*",
}


def parse_feed(content, source: FeedSource) -> FeedBatch:
    """Parse feed XML into a batch. Broken entries are skipped."""
    feed = feedparser.parse(content)

    if feed.bozo and not feed.entries:
        error = str(getattr(feed, "bozo_exception", "unparseable feed"))
        return FeedBatch(source=source.name, error=error)

    items = []
    for entry in feed.entries:
        try:
            items.append(RawFeedItem.from_entry(entry))
        except Exception as e:
            logger.debug("parse_entry_error", source=source.name, error=str(e))
    return FeedBatch(source=source.name, items=items)


class FeedFetcher:
    """Async RSS feed fetcher."""

    def __init__(
        self,
        timeout: int = 15,
        retries: int = 3,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.timeout = timeout
        self.retries = max(1, retries)
        self._client = client

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.retries),
            wait=wait_exponential(multiplier=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await client.get(url, headers=REQUEST_HEADERS)

    async def fetch(self, source: FeedSource) -> FeedBatch:
        """Fetch and parse one source."""
        start_time = datetime.now()

        try:
            if self._client is not None:
                response = await self._get(self._client, source.url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await self._get(client, source.url)
        except httpx.TimeoutException:
            logger.warning("fetch_rss_timeout", source=source.name)
            return FeedBatch(source=source.name, error="timeout")
        except (httpx.HTTPError, RetryError) as e:
            logger.warning("fetch_rss_error", source=source.name, error=str(e))
            return FeedBatch(source=source.name, error=str(e))

        if response.status_code != 200:
            logger.warning("fetch_rss_error", source=source.name, status_code=response.status_code)
            return FeedBatch(source=source.name, error=f"HTTP {response.status_code}")

        batch = parse_feed(response.content, source)

        duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
        if batch.ok:
            logger.info("fetch_rss_ok", source=source.name, items=len(batch.items), duration_ms=duration_ms)
        else:
            logger.warning("fetch_rss_unparseable", source=source.name, error=batch.error)
        return batch

    async def fetch_all(
        self,
        sources: List[FeedSource],
        max_concurrent: int = 10
    ) -> List[FeedBatch]:
        """Fetch all sources concurrently. One batch per source, in source order."""
        semaphore = asyncio.Semaphore(max_concurrent)

        async def fetch_with_semaphore(source: FeedSource) -> FeedBatch:
            async with semaphore:
                return await self.fetch(source)

        results = await asyncio.gather(
            *[fetch_with_semaphore(s) for s in sources],
            return_exceptions=True
        )

        batches = []
        for source, result in zip(sources, results):
            if isinstance(result, FeedBatch):
                batches.append(result)
            else:
                logger.error("fetch_all_error", source=source.name, error=str(result))
                batches.append(FeedBatch(source=source.name, error=str(result)))

        logger.info(
            "fetch_all_complete",
            sources=len(sources),
            failed=sum(1 for b in batches if not b.ok),
            items=sum(len(b.items) for b in batches)
        )
        return batches
