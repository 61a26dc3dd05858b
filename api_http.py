"""HTTP API for the dashboard."""
from typing import Awaitable, Callable, List, Optional
from aiohttp import web

from aggregator import Aggregator, PipelineError
from config_loader import AppConfig
from logging_setup import TraceContext, get_logger, new_trace_id
from models import AggregateOptions, AggregateResult, FeedBatch
from rss import FeedFetcher
from time_utils import utcnow
from views import ViewFilter, draft_caption, tag_universe

logger = get_logger("api.http")

BatchProvider = Callable[[], Awaitable[List[FeedBatch]]]


class ApiServer:
    """Serves the three collections, caption drafts and a health check."""

    def __init__(
        self,
        config: AppConfig,
        aggregator: Aggregator = None,
        fetch_batches: Optional[BatchProvider] = None,
        host: str = "0.0.0.0",
        port: int = 8080,
        cache_seconds: int = 60,
        default_keywords: Optional[List[str]] = None
    ):
        self.config = config
        self.aggregator = aggregator or Aggregator(config)
        self.fetch_batches = fetch_batches or self._fetch_feeds
        self.host = host
        self.port = port
        self.cache_seconds = cache_seconds
        self.default_keywords = default_keywords or None

        self.app = web.Application()
        self.app.router.add_get("/api/items", self.items)
        self.app.router.add_get("/api/caption", self.caption)
        self.app.router.add_get("/health", self.health_check)
        self.runner = None
        self.site = None

    async def _fetch_feeds(self) -> List[FeedBatch]:
        fetcher = FeedFetcher(timeout=self.config.http.timeout, retries=self.config.http.retries)
        return await fetcher.fetch_all(self.config.feeds, self.config.http.max_concurrent)

    async def start(self):
        """Start the server."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()
        logger.info("api_server_started", host=self.host, port=self.port)

    async def stop(self):
        """Stop the server."""
        if self.runner:
            await self.runner.cleanup()

    def _headers(self) -> dict:
        return {"Cache-Control": f"s-maxage={self.cache_seconds}, stale-while-revalidate"}

    async def _aggregate(self, options: AggregateOptions) -> AggregateResult:
        if options.keywords is None and self.default_keywords:
            options = options.model_copy(update={"keywords": self.default_keywords})

        now = utcnow()
        with TraceContext(new_trace_id(), entry="api"):
            batches = await self.fetch_batches()
            try:
                return self.aggregator.run(batches, now, options)
            except PipelineError as e:
                logger.error("aggregation_failed", error=str(e))
                return AggregateResult.empty(
                    days=options.days or self.config.aggregation.window_days,
                    generated_at=now
                )

    async def items(self, request):
        """GET /api/items?types=news,events,quotes&days=7&keywords=a,b&limit=100"""
        options = AggregateOptions.from_query(request.query)
        result = await self._aggregate(options)
        return web.json_response(result.to_dict(), headers=self._headers())

    async def caption(self, request):
        """GET /api/caption?window=7d&tag=Kereta&q=tol&minister=1"""
        options = AggregateOptions.from_query({"days": 90})
        result = await self._aggregate(options)

        view = ViewFilter.from_query(request.query, utcnow())
        news = view.news(result.news)
        events = view.events(result.events)

        return web.json_response({
            "caption": draft_caption(news, events, self.config.caption),
            "tags": tag_universe(result.news, result.events, result.quotes),
            "counts": {
                "news": len(news),
                "events": len(events),
                "quotes": len(view.quotes(result.quotes)),
            },
        }, headers=self._headers())

    async def health_check(self, request):
        """GET /health"""
        return web.json_response({
            "status": "OK",
            "details": {
                "feeds": len(self.config.feeds),
                "window_days": self.config.aggregation.window_days,
            }
        })
