"""Pipeline data model: raw feed input and the three output record types."""
import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from time_utils import to_iso


COLLECTIONS = ("news", "events", "quotes")

# First non-empty field wins, in this order
BODY_FIELDS = ("content", "content:encoded", "contentSnippet", "summary", "description")
DATE_FIELDS = ("isoDate", "pubDate", "published", "updated", "dc:date")


def _first_text(entry: Mapping[str, Any], keys) -> str:
    for key in keys:
        value = entry.get(key)
        # feedparser exposes content as a list of {"value": ...} dicts
        if isinstance(value, list):
            value = next(
                (v.get("value") for v in value if isinstance(v, Mapping) and v.get("value")),
                None
            )
        if isinstance(value, str) and value.strip():
            return value
    return ""


class RawFeedItem(BaseModel):
    """One feed entry as handed over by the fetcher. Not persisted."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    link: str = ""
    body: str = ""
    published: Any = None

    @classmethod
    def from_entry(cls, entry: Mapping[str, Any]) -> "RawFeedItem":
        """Build from a feedparser entry or a plain dict with alternate field names."""
        published = None
        for key in DATE_FIELDS:
            value = entry.get(key)
            if value:
                published = value
                break

        return cls(
            title=(entry.get("title") or "").strip(),
            link=(entry.get("link") or "").strip(),
            body=_first_text(entry, BODY_FIELDS),
            published=published,
        )


@dataclass
class FeedBatch:
    """Items from one source. `error` set means the source contributed nothing."""
    source: str
    items: List[RawFeedItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class QuoteCandidate:
    """Scored quotation candidate."""
    text: str
    score: int
    reasons: List[str]
    origin: str = "direct"  # direct, attributed, fallback


class Record(BaseModel):
    """Base for output records: camelCase on the wire, ISO dates."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class NewsRecord(Record):
    id: str
    title: str
    source: str
    published_at: datetime
    link: str
    summary: str = ""
    entities: List[str] = Field(default_factory=list)

    @field_serializer("published_at")
    def _serialize_published_at(self, value: datetime) -> str:
        return to_iso(value)


class EventRecord(Record):
    id: str
    title: str
    date: datetime
    location: str
    attended_by_minister: bool
    source: str
    tags: List[str] = Field(default_factory=list)
    summary: str = ""
    link: str

    @field_serializer("date")
    def _serialize_date(self, value: datetime) -> str:
        return to_iso(value)


class QuoteRecord(Record):
    id: str
    text: str
    speaker: str
    date: datetime
    context: str = ""
    link: str
    tags: List[str] = Field(default_factory=list)

    @field_serializer("date")
    def _serialize_date(self, value: datetime) -> str:
        return to_iso(value)


def news_id(source: str, link: str, published_at: datetime) -> str:
    """Stable id per source + link + timestamp."""
    raw = f"{source}|{link}|{to_iso(published_at)}"
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


def _positive_int(value: Any) -> Optional[int]:
    try:
        n = int(float(value))
    except (TypeError, ValueError):
        return None
    return n if n > 0 else None


class AggregateOptions(BaseModel):
    """Caller overrides for one aggregation run."""
    types: List[str] = Field(default_factory=lambda: list(COLLECTIONS))
    days: Optional[int] = None
    keywords: Optional[List[str]] = None
    limit: Optional[int] = None

    @classmethod
    def from_query(cls, params: Mapping[str, Any]) -> "AggregateOptions":
        """
        Parse request query parameters.

        Unknown collection names are dropped, non-positive numbers fall back
        to the configured defaults, an empty keyword list means "use config".
        """
        raw_types = params.get("types") or ",".join(COLLECTIONS)
        types = [t.strip().lower() for t in str(raw_types).split(",")]
        types = [t for t in types if t in COLLECTIONS]

        keywords = None
        if params.get("keywords"):
            keywords = [k.strip() for k in str(params["keywords"]).split(",") if k.strip()]

        return cls(
            types=types,
            days=_positive_int(params.get("days")),
            keywords=keywords or None,
            limit=_positive_int(params.get("limit")),
        )


class AggregateMeta(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    days: int
    generated_at: datetime
    sources: List[str] = Field(default_factory=list)
    failed_sources: List[str] = Field(default_factory=list)
    counts: dict = Field(default_factory=dict)

    @field_serializer("generated_at")
    def _serialize_generated_at(self, value: datetime) -> str:
        return to_iso(value)


class AggregateResult(BaseModel):
    """The three collections plus run metadata. Unselected collections stay empty."""
    news: List[NewsRecord] = Field(default_factory=list)
    events: List[EventRecord] = Field(default_factory=list)
    quotes: List[QuoteRecord] = Field(default_factory=list)
    meta: Optional[AggregateMeta] = None

    @classmethod
    def empty(cls, days: int, generated_at: datetime) -> "AggregateResult":
        return cls(meta=AggregateMeta(days=days, generated_at=generated_at))

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)
