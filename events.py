"""Event inference: promote news items that describe an attendable occurrence."""
import re
from datetime import datetime, timedelta
from typing import Optional

from config_loader import VocabularyConfig
from logging_setup import get_logger
from models import EventRecord, NewsRecord
from quotes import word_pattern

logger = get_logger("pipeline.events")

NUMERIC_DATE_RE = re.compile(r"\b\d{1,2}[/-]\d{1,2}(?:[/-]\d{2,4})?\b")

MAX_LOCATION_CHARS = 50


class EventDetector:
    """Keyword heuristics for events, location and event date."""

    def __init__(self, vocabulary: VocabularyConfig, location_placeholder: str = "—"):
        self.event_terms = [t.lower() for t in vocabulary.event_terms if t.strip()]
        self.aliases = [a.lower() for a in vocabulary.ministry_aliases if a.strip()]
        self.location_placeholder = location_placeholder
        self._future_re = word_pattern(vocabulary.future_markers)

        months = [re.escape(m.lower()) for m in vocabulary.month_names if m.strip()]
        if months:
            self._month_re = re.compile(
                rf"\b\d{{1,2}}\s+(?:{'|'.join(months)})(?:\s+\d{{4}})?\b",
                re.IGNORECASE
            )
        else:
            self._month_re = re.compile(r"(?!)")

        # Preposition in any case, then 1-5 capitalized words
        prepositions = [re.escape(p.lower()) for p in vocabulary.location_prepositions if p.strip()]
        if prepositions:
            self._location_re = re.compile(
                rf"\b(?i:{'|'.join(prepositions)})\s+"
                r"([A-Z][\w'\-]*(?:\s+[A-Z][\w'\-]*){0,4})"
            )
        else:
            self._location_re = re.compile(r"(?!)")

    def has_future_marker(self, text: str) -> bool:
        return self._future_re.search(text) is not None

    def mentions_minister(self, text: str) -> bool:
        lowered = text.lower()
        return any(alias in lowered for alias in self.aliases)

    def looks_like_event(self, title: str, summary: str) -> bool:
        """Event term, future marker, numeric date or day + month name."""
        combined = f"{title} {summary}".lower()
        if any(term in combined for term in self.event_terms):
            return True
        if self.has_future_marker(combined):
            return True
        if NUMERIC_DATE_RE.search(combined):
            return True
        return self._month_re.search(combined) is not None

    def guess_location(self, text: str) -> str:
        """First capitalized phrase after "di", or the placeholder."""
        match = self._location_re.search(text or "")
        if not match:
            return self.location_placeholder

        location = match.group(1).strip()
        if len(location) > MAX_LOCATION_CHARS:
            location = location[:MAX_LOCATION_CHARS].rsplit(" ", 1)[0]
        return location

    def event_date(self, published_at: datetime, text: str) -> datetime:
        """Published date, moved one calendar day ahead for "akan"/"besok" copy."""
        if self.has_future_marker(text):
            try:
                return published_at + timedelta(days=1)
            except OverflowError:
                return published_at
        return published_at

    def infer(self, news: NewsRecord, since: Optional[datetime] = None) -> Optional[EventRecord]:
        """
        Derive an event from a news record.

        The shifted date is compared against the un-shifted window start, so
        an event moved forward can stay in the window its article left.

        Returns:
            EventRecord, or None when the item is not event-like or too old
        """
        if not self.looks_like_event(news.title, news.summary):
            return None

        combined = f"{news.title} {news.summary}"
        date = self.event_date(news.published_at, combined)
        if since is not None and date < since:
            logger.debug("event_outside_window", news_id=news.id)
            return None

        return EventRecord(
            id=f"ev-{news.id}",
            title=news.title,
            date=date,
            location=self.guess_location(combined),
            attended_by_minister=self.mentions_minister(combined),
            source=news.source,
            tags=list(news.entities),
            summary=news.summary,
            link=news.link,
        )
