"""Pipeline package."""
from text import normalize_text, segment_sentences, truncate_text
from quotes import QuoteExtractor, QuoteScorer, quote_source_text
from entities import EntityTagger
from relevance import RelevanceFilter, RelevanceResult
from events import EventDetector
from dedup import dedupe, news_key, event_key, quote_key
from aggregator import Aggregator, ItemRecords, PipelineError

__all__ = [
    "normalize_text", "segment_sentences", "truncate_text",
    "QuoteExtractor", "QuoteScorer", "quote_source_text",
    "EntityTagger",
    "RelevanceFilter", "RelevanceResult",
    "EventDetector",
    "dedupe", "news_key", "event_key", "quote_key",
    "Aggregator", "ItemRecords", "PipelineError",
]
