"""Main entry point for the Kemenhub news monitor."""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from settings import get_settings
from config_loader import AppConfig, get_config_loader
from logging_setup import setup_logging, get_logger, TraceContext, new_trace_id
from models import AggregateOptions, AggregateResult
from pipeline_pkg import Aggregator, PipelineError
from rss import FeedFetcher
from api_http import ApiServer
from time_utils import utcnow


logger = None  # Will be initialized in main()


def load_config() -> AppConfig:
    """Load YAML config and apply environment overrides."""
    settings = get_settings()
    loader = get_config_loader(Path(settings.config_path) if settings.config_path else None)

    overrides = {}
    if settings.window_days:
        overrides["aggregation.window_days"] = settings.window_days
    if settings.max_items:
        overrides["aggregation.max_items"] = settings.max_items
    loader.set_overrides(overrides)
    return loader.config


async def run_once(config: AppConfig, options: AggregateOptions) -> dict:
    """Fetch every feed once and aggregate."""
    now = utcnow()
    fetcher = FeedFetcher(timeout=config.http.timeout, retries=config.http.retries)

    with TraceContext(new_trace_id(), entry="once"):
        batches = await fetcher.fetch_all(config.feeds, config.http.max_concurrent)
        try:
            result = Aggregator(config).run(batches, now, options)
        except PipelineError as e:
            logger.error("aggregation_failed", error=str(e))
            result = AggregateResult.empty(days=options.days or config.aggregation.window_days, generated_at=now)
    return result.to_dict()


async def serve(config: AppConfig) -> None:
    """Run the HTTP API until interrupted."""
    settings = get_settings()
    server = ApiServer(
        config,
        host=settings.http_host,
        port=settings.http_port,
        cache_seconds=settings.cache_seconds,
        default_keywords=settings.keyword_list,
    )
    await server.start()
    try:
        await asyncio.Event().wait()
    finally:
        await server.stop()


def main(argv: Optional[list] = None) -> int:
    global logger

    parser = argparse.ArgumentParser(description="Kemenhub news, events and quotes monitor")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the HTTP API")

    once = sub.add_parser("once", help="Fetch feeds once and print JSON")
    once.add_argument("--types", default="news,events,quotes")
    once.add_argument("--days", type=int, default=None)
    once.add_argument("--keywords", default="")
    once.add_argument("--limit", type=int, default=None)

    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("main")

    config = load_config()

    if args.command == "serve":
        try:
            asyncio.run(serve(config))
        except KeyboardInterrupt:
            logger.info("shutdown")
        return 0

    options = AggregateOptions.from_query({
        "types": args.types,
        "days": args.days,
        "keywords": args.keywords or ",".join(settings.keyword_list),
        "limit": args.limit,
    })
    body = asyncio.run(run_once(config, options))
    json.dump(body, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
