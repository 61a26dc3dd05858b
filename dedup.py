"""Deduplication of output records by derived key.

Items arrive from concurrently fetched feeds in any order. Survivors are
chosen by a canonical ordering, so the deduplicated collection depends only
on the set of input records, never on their arrival order.
"""
from datetime import datetime
from typing import Callable, Iterable, List, TypeVar

from models import EventRecord, NewsRecord, QuoteRecord
from time_utils import to_iso

T = TypeVar("T", NewsRecord, EventRecord, QuoteRecord)


def news_key(record: NewsRecord) -> str:
    return f"{record.title}|{to_iso(record.published_at)}"


def event_key(record: EventRecord) -> str:
    return f"{record.title}|{to_iso(record.date)}"


def quote_key(record: QuoteRecord) -> str:
    return f"{record.text}|{to_iso(record.date)}"


def record_date(record) -> datetime:
    if isinstance(record, NewsRecord):
        return record.published_at
    return record.date


def canonical_order(record) -> tuple:
    """Newest first; ties broken by content so the order is total."""
    return (-record_date(record).timestamp(), record.id, record.model_dump_json())


def dedupe(records: Iterable[T], key: Callable[[T], str]) -> List[T]:
    """
    Keep exactly one record per key and per id.

    Returns:
        Survivors sorted newest first
    """
    seen_keys = set()
    seen_ids = set()
    out: List[T] = []

    for record in sorted(records, key=canonical_order):
        k = key(record)
        if k in seen_keys or record.id in seen_ids:
            continue
        seen_keys.add(k)
        seen_ids.add(record.id)
        out.append(record)
    return out
