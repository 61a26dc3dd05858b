"""Operator-facing views: dashboard filters and caption drafting."""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, List, Mapping, Optional, Sequence, Union

from config_loader import CaptionConfig
from models import EventRecord, NewsRecord, QuoteRecord

ALL_TAGS = "All"

# Dashboard time filters in days
TIME_FILTERS = {"24h": 1, "7d": 7, "30d": 30, "90d": 90}


@dataclass
class ViewFilter:
    """Filters the dashboard applies on top of an aggregation result."""
    since: Optional[datetime] = None
    tag: str = ALL_TAGS
    query: str = ""
    only_minister: bool = False

    @classmethod
    def from_query(cls, params: Mapping[str, Any], now: datetime) -> "ViewFilter":
        """Build from `window` (24h/7d/30d/90d), `tag`, `q` and `minister` params."""
        days = TIME_FILTERS.get(str(params.get("window") or "7d"), 7)
        only = str(params.get("minister", "")).lower() in ("1", "true", "yes")
        return cls(
            since=now - timedelta(days=days),
            tag=(params.get("tag") or ALL_TAGS).strip() or ALL_TAGS,
            query=(params.get("q") or "").strip(),
            only_minister=only,
        )

    def _matches(self, date: datetime, tags: Sequence[str], haystack: Sequence[str]) -> bool:
        if self.since is not None and date < self.since:
            return False
        if self.tag != ALL_TAGS and self.tag not in tags:
            return False
        if self.query:
            text = " ".join(h for h in haystack if h).lower()
            if self.query.lower() not in text:
                return False
        return True

    def news(self, items: List[NewsRecord]) -> List[NewsRecord]:
        kept = [
            n for n in items
            if self._matches(n.published_at, n.entities, [n.title, n.summary, n.source, *n.entities])
        ]
        return sorted(kept, key=lambda n: n.published_at, reverse=True)

    def events(self, items: List[EventRecord]) -> List[EventRecord]:
        kept = [
            e for e in items
            if (e.attended_by_minister or not self.only_minister)
            and self._matches(e.date, e.tags, [e.title, e.location, e.summary, e.source, *e.tags])
        ]
        return sorted(kept, key=lambda e: e.date, reverse=True)

    def quotes(self, items: List[QuoteRecord]) -> List[QuoteRecord]:
        kept = [
            q for q in items
            if self._matches(q.date, q.tags, [q.text, q.context, q.speaker, *q.tags])
        ]
        return sorted(kept, key=lambda q: q.date, reverse=True)


def tag_universe(
    news: List[NewsRecord],
    events: List[EventRecord],
    quotes: List[QuoteRecord]
) -> List[str]:
    """"All" followed by every tag in first-seen order."""
    tags = [ALL_TAGS]
    for group in [n.entities for n in news] + [e.tags for e in events] + [q.tags for q in quotes]:
        for tag in group:
            if tag not in tags:
                tags.append(tag)
    return tags


def draft_caption(
    news: List[NewsRecord],
    events: List[EventRecord],
    config: CaptionConfig = None
) -> Optional[str]:
    """
    Draft a social caption from the top filtered news item, else the top event.

    Returns:
        Caption text, or None when there is nothing to post
    """
    config = config or CaptionConfig()
    top: Union[NewsRecord, EventRecord, None] = news[0] if news else (events[0] if events else None)
    if top is None:
        return None

    title = top.title or config.fallback_title
    info = top.summary or top.source or ""
    hashtags = " ".join(config.hashtags)
    return f"{config.prefix}: {title} - {info}. {hashtags}".strip()
