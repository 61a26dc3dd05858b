"""Aggregation pipeline: feed items -> news, events, quotes.

Per item: normalize -> relevance gate -> tags -> event inference ->
quote extraction -> records. After all feeds: dedupe, sort newest first, cap.
The run is a pure function of (batches, config, reference_time).
"""
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Union

from config_loader import AppConfig
from dedup import dedupe, event_key, news_key, quote_key
from entities import EntityTagger
from events import EventDetector
from logging_setup import get_logger
from models import (
    AggregateMeta, AggregateOptions, AggregateResult, EventRecord,
    FeedBatch, NewsRecord, QuoteRecord, RawFeedItem, news_id,
)
from quotes import QuoteExtractor, quote_source_text
from relevance import RelevanceFilter
from text import normalize_text, truncate_text
from time_utils import as_utc, coerce_feed_date, utcnow

logger = get_logger("pipeline.aggregator")


class PipelineError(Exception):
    """The pipeline cannot run at all (broken configuration)."""


@dataclass
class ItemRecords:
    """Records derived from one feed item."""
    news: NewsRecord
    event: Optional[EventRecord] = None
    quote: Optional[QuoteRecord] = None


def _validate(config: AppConfig) -> None:
    q = config.quotes
    if not 0 < q.fragment_min_chars <= q.fragment_max_chars:
        raise PipelineError("quotes.fragment_min_chars must be in 1..fragment_max_chars")
    if q.truncate_to + len(q.ellipsis) > q.max_chars:
        raise PipelineError("quotes.truncate_to plus ellipsis exceeds quotes.max_chars")
    if config.aggregation.summary_max_chars <= len(q.ellipsis):
        raise PipelineError("aggregation.summary_max_chars is too small")
    if config.aggregation.window_days <= 0 or config.aggregation.max_items <= 0:
        raise PipelineError("aggregation.window_days and max_items must be positive")


class Aggregator:
    """Turns feed batches into the three output collections."""

    def __init__(self, config: AppConfig = None):
        self.config = config or AppConfig()
        _validate(self.config)

        vocabulary = self.config.vocabulary
        try:
            self.relevance = RelevanceFilter(
                vocabulary,
                use_domain_keywords=self.config.aggregation.gate_on_domain_keywords
            )
            self.tagger = EntityTagger(vocabulary.entity_rules)
            self.events = EventDetector(
                vocabulary,
                location_placeholder=self.config.aggregation.location_placeholder
            )
            self.quotes = QuoteExtractor(vocabulary, self.config.quotes)
        except re.error as e:
            raise PipelineError(f"invalid vocabulary pattern: {e}") from e

    def _normalize(self, raw: str) -> str:
        flags = self.config.normalize
        return normalize_text(raw, decode=flags.decode_entities, canonical_quotes=flags.canonicalize_quotes)

    def process_item(
        self,
        item: Union[RawFeedItem, Mapping[str, Any]],
        source: str,
        reference_time: datetime,
        since: Optional[datetime] = None,
        keywords: Optional[List[str]] = None
    ) -> Optional[ItemRecords]:
        """
        Run one feed item through the pipeline.

        Missing links get a placeholder and bad timestamps become
        `reference_time`; nothing is rejected for being malformed.

        Returns:
            ItemRecords, or None when the item fails the relevance gate or
            falls outside the window
        """
        if not isinstance(item, RawFeedItem):
            item = RawFeedItem.from_entry(item)

        agg = self.config.aggregation
        title = self._normalize(item.title)
        body = self._normalize(item.body)

        if not self.relevance.check(title, body, keywords).passed:
            return None

        published_at = coerce_feed_date(item.published, reference_time)
        if since is not None and published_at < since:
            return None

        link = item.link.strip() or agg.link_placeholder
        combined = f"{title} {body}"
        entities = self.tagger.tag(combined)

        news = NewsRecord(
            id=news_id(source, link, published_at),
            title=title,
            source=source,
            published_at=published_at,
            link=link,
            summary=truncate_text(body, agg.summary_max_chars, self.config.quotes.ellipsis),
            entities=entities,
        )

        event = self.events.infer(news, since)

        quote = None
        # Quotes are attributed to the minister, so the article must name them
        if self.quotes.scorer.mentions_ministry(combined):
            best = self.quotes.best_quote(quote_source_text(title, body))
            if best:
                tags = [self.config.quotes.tag] + [e for e in entities if e != self.config.quotes.tag]
                quote = QuoteRecord(
                    id=f"q-{news.id}",
                    text=best.text,
                    speaker=self.config.quotes.speaker,
                    date=published_at,
                    context=title or source,
                    link=link,
                    tags=tags,
                )

        return ItemRecords(news=news, event=event, quote=quote)

    def run(
        self,
        batches: Iterable[FeedBatch],
        reference_time: Optional[datetime] = None,
        options: Optional[AggregateOptions] = None
    ) -> AggregateResult:
        """
        Aggregate all batches.

        A batch that failed upstream counts as zero items and is listed in
        `failed_sources`. An item that blows up here is skipped on its own;
        the rest of its feed is kept.

        Args:
            batches: One FeedBatch per source, any order
            reference_time: "Now" for the window and missing timestamps
            options: Collections to fill, window, keywords and cap overrides

        Returns:
            AggregateResult with unselected collections left empty
        """
        reference_time = as_utc(reference_time or utcnow())
        options = options or AggregateOptions()
        agg = self.config.aggregation

        days = options.days or agg.window_days
        limit = options.limit or agg.max_items
        since = reference_time - timedelta(days=days)

        news: List[NewsRecord] = []
        events: List[EventRecord] = []
        quotes: List[QuoteRecord] = []
        sources = set()
        failed = set()

        for batch in batches:
            sources.add(batch.source)
            if not batch.ok:
                logger.warning("feed_skipped", source=batch.source, error=batch.error)
                failed.add(batch.source)
                continue

            for item in batch.items:
                try:
                    records = self.process_item(item, batch.source, reference_time, since, options.keywords)
                except PipelineError:
                    raise
                except Exception as e:
                    # A malformed entry costs only itself
                    logger.error("item_processing_failed", source=batch.source, error=str(e))
                    continue

                if records is None:
                    continue
                news.append(records.news)
                if records.event:
                    events.append(records.event)
                if records.quote:
                    quotes.append(records.quote)

        selected = set(options.types)
        result = AggregateResult(
            news=dedupe(news, news_key)[:limit] if "news" in selected else [],
            events=dedupe(events, event_key)[:limit] if "events" in selected else [],
            quotes=dedupe(quotes, quote_key)[:limit] if "quotes" in selected else [],
        )
        result.meta = AggregateMeta(
            days=days,
            generated_at=reference_time,
            sources=sorted(sources),
            failed_sources=sorted(failed),
            counts={
                "news": len(result.news),
                "events": len(result.events),
                "quotes": len(result.quotes),
            },
        )

        logger.info(
            "aggregation_complete",
            sources=len(sources),
            failed=len(failed),
            **result.meta.counts
        )
        return result
